"""Pytest configuration and shared fixtures for Interlinx bootstrap installer tests."""

import hashlib
import io
import logging
import tarfile
import pytest
from pathlib import Path
from typing import Callable, Generator, List, Optional
from unittest.mock import MagicMock

from interlinx_bootstrap.config.credentials import Credential
from interlinx_bootstrap.config.settings import InstallerSettings
from interlinx_bootstrap.github.client import GitHubClient
from interlinx_bootstrap.github.models import RepositoryRef


# Test constants
TEST_TOKEN = "ghp_" + "A1b2C3d4E5" * 4
TEST_API_BASE = "https://api.github.com"
CONTROLLER_REPO = "interlinx-io/interlinx-controller"
AGENT_REPO = "interlinx-io/downloads"


@pytest.fixture
def credential() -> Credential:
    """Provide a test credential."""
    return Credential(TEST_TOKEN)


@pytest.fixture
def client(credential: Credential) -> Generator[GitHubClient, None, None]:
    """Provide a GitHubClient with a test token."""
    github_client = GitHubClient(credential, timeout=10)
    yield github_client
    github_client.close()


@pytest.fixture
def controller_repo() -> RepositoryRef:
    """The controller repository."""
    return RepositoryRef.parse(CONTROLLER_REPO)


@pytest.fixture
def agent_repo() -> RepositoryRef:
    """The agent repository."""
    return RepositoryRef.parse(AGENT_REPO)


@pytest.fixture
def install_root(tmp_path: Path) -> Path:
    """Temporary stand-in for /opt."""
    root = tmp_path / "opt"
    root.mkdir()
    return root


@pytest.fixture
def working_dir(tmp_path: Path) -> Path:
    """Temporary working directory for agent downloads."""
    work = tmp_path / "work"
    work.mkdir()
    return work


@pytest.fixture
def settings(install_root: Path) -> InstallerSettings:
    """Installer settings pointing at the temporary install root."""
    return InstallerSettings(install_dir=str(install_root), timeout=10)


@pytest.fixture
def make_response() -> Callable[..., MagicMock]:
    """Factory for mock requests.Response objects."""

    def _make(
        status_code: int = 200,
        json_data=None,
        content: bytes = b"",
        text: str = "",
    ) -> MagicMock:
        response = MagicMock()
        response.status_code = status_code
        if json_data is not None:
            response.json.return_value = json_data
        else:
            response.json.side_effect = ValueError("No JSON object could be decoded")
        response.text = text
        response.iter_content = MagicMock(return_value=[content] if content else [])
        return response

    return _make


@pytest.fixture
def make_release() -> Callable[..., dict]:
    """Factory for GitHub release API documents."""

    def _make(
        tag: str,
        asset_names: List[str],
        repo: str = CONTROLLER_REPO,
        first_id: int = 1000,
    ) -> dict:
        return {
            "tag_name": tag,
            "name": f"Release {tag}",
            "published_at": "2024-05-02T09:15:00Z",
            "prerelease": False,
            "draft": False,
            "assets": [
                {
                    "id": first_id + i,
                    "name": name,
                    "url": f"{TEST_API_BASE}/repos/{repo}/releases/assets/{first_id + i}",
                    "browser_download_url": f"https://github.com/{repo}/releases/download/{tag}/{name}",
                    "size": 1024,
                    "content_type": "application/octet-stream",
                }
                for i, name in enumerate(asset_names)
            ],
        }

    return _make


@pytest.fixture
def make_controller_tarball(tmp_path: Path) -> Callable[..., bytes]:
    """Factory for controller .tar.gz archives as bytes."""

    def _make(top_level: str, files: Optional[dict] = None) -> bytes:
        files = files or {
            "README.md": b"# Interlinx Controller\n",
            "install.sh": b"#!/bin/sh\necho installing\n",
        }
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tf:
            directory = tarfile.TarInfo(top_level)
            directory.type = tarfile.DIRTYPE
            directory.mode = 0o755
            tf.addfile(directory)
            for name, data in files.items():
                info = tarfile.TarInfo(f"{top_level}/{name}")
                info.size = len(data)
                info.mode = 0o755 if name.endswith(".sh") else 0o644
                tf.addfile(info, io.BytesIO(data))
        return buffer.getvalue()

    return _make


def sha256_hex(data: bytes) -> str:
    """Digest helper for building checksum files."""
    return hashlib.sha256(data).hexdigest()


@pytest.fixture
def checksum_line() -> Callable[[bytes, str], bytes]:
    """Factory for sha256sum-style checksum file contents."""

    def _make(data: bytes, file_name: str) -> bytes:
        return f"{sha256_hex(data)}  {file_name}\n".encode("utf-8")

    return _make


@pytest.fixture(autouse=True)
def reset_installer_logger() -> Generator[None, None, None]:
    """Drop handlers added by setup_logging so streams don't leak between tests."""
    yield
    logger = logging.getLogger("interlinx_bootstrap")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
