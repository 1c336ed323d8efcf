"""Bootstrap run orchestration for the Interlinx installer.

Runs the controller archive and, in the dual-artifact variant, the agent
executable through their install sequences:

    NOT_STARTED -> VERSION_RESOLVED -> ASSET_LOCATED -> DOWNLOADED
        -> VERIFIED (archive only) -> INSTALLED -> DONE

An artifact that is already present goes straight from NOT_STARTED to
DONE. Any failure moves the artifact to FAILED and aborts the run.
"""

import getpass
import logging
import shutil
import stat
import tempfile
from contextlib import ExitStack
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from interlinx_bootstrap.config.credentials import CredentialManager, acquire_credential
from interlinx_bootstrap.config.paths import (
    agent_output_path,
    checksum_asset_name,
    controller_archive_name,
    controller_install_dir,
)
from interlinx_bootstrap.config.settings import InstallerSettings
from interlinx_bootstrap.exceptions import (
    ConfigurationError,
    InstallError,
    InstallerError,
    LayoutMismatchError,
    MalformedResponseError,
)
from interlinx_bootstrap.github.client import GitHubClient
from interlinx_bootstrap.github.models import DownloadTarget, RepositoryRef
from interlinx_bootstrap.install.archive import install_archive
from interlinx_bootstrap.install.verifier import verify
from interlinx_bootstrap.release.fetcher import Fetcher
from interlinx_bootstrap.release.locator import AssetLocator
from interlinx_bootstrap.release.resolver import ReleaseResolver
from interlinx_bootstrap.utils.validators import validate_version_tag

logger = logging.getLogger("interlinx_bootstrap.orchestrator")


class ArtifactKind(Enum):
    """Things a bootstrap run can install."""
    CONTROLLER = "controller"  # .tar.gz archive expanded under the install dir
    AGENT = "agent"            # Freestanding executable in the working dir


class ArtifactState(Enum):
    """Progress of one artifact through its install sequence."""
    NOT_STARTED = "not_started"
    VERSION_RESOLVED = "version_resolved"
    ASSET_LOCATED = "asset_located"
    DOWNLOADED = "downloaded"
    VERIFIED = "verified"
    INSTALLED = "installed"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ArtifactRun:
    """One artifact's pass through the install sequence."""
    kind: ArtifactKind
    repository: RepositoryRef
    requested_version: Optional[str] = None
    resolved_version: Optional[str] = None
    state: ArtifactState = ArtifactState.NOT_STARTED
    path: Optional[Path] = None
    skipped: bool = False
    failure: Optional[InstallerError] = None

    def advance(self, state: ArtifactState) -> None:
        """Move to the next state."""
        logger.debug(f"{self.kind.value}: {self.state.value} -> {state.value}")
        self.state = state

    def fail(self, error: InstallerError) -> None:
        """Record a terminal failure."""
        self.failure = error
        self.advance(ArtifactState.FAILED)


@dataclass
class InstalledArtifact:
    """What ended up on disk for one artifact."""
    kind: ArtifactKind
    version: str
    path: Path
    skipped: bool = False


@dataclass
class BootstrapResult:
    """Outcome of a complete run."""
    controller: InstalledArtifact
    agent: Optional[InstalledArtifact] = None


def make_executable(path: Path) -> None:
    """Add execute permission for user, group and others."""
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def check_requested_version(version: Optional[str]) -> Optional[str]:
    """
    Validate a version given by the operator.

    Raises:
        ConfigurationError: If the tag cannot be used in a URL or file name
    """
    if version is None:
        return None
    is_valid, error = validate_version_tag(version)
    if not is_valid:
        raise ConfigurationError(error)
    return version.strip()


class Orchestrator:
    """Sequences resolve, locate, fetch, verify and install per artifact."""

    def __init__(
        self,
        settings: InstallerSettings,
        client: GitHubClient,
        download_dir: Path,
        working_dir: Optional[Path] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Installer settings
            client: Authenticated GitHub client
            download_dir: Scratch directory for downloads
            working_dir: Where the agent executable is written (default: cwd)
        """
        self._settings = settings
        self._download_dir = download_dir
        self._working_dir = working_dir or Path.cwd()
        self._resolver = ReleaseResolver(client)
        self._locator = AssetLocator(client)
        self._fetcher = Fetcher(client)
        self.last_controller_run: Optional[ArtifactRun] = None
        self.last_agent_run: Optional[ArtifactRun] = None

    def _resolve(self, run: ArtifactRun) -> str:
        version = self._resolver.resolve(run.repository, run.requested_version)
        is_valid, error = validate_version_tag(version)
        if not is_valid:
            raise MalformedResponseError(str(run.repository), error)
        run.resolved_version = version
        run.advance(ArtifactState.VERSION_RESOLVED)
        return version

    def _skip(self, run: ArtifactRun, version: str, path: Path) -> InstalledArtifact:
        run.resolved_version = version
        run.path = path
        run.skipped = True
        run.advance(ArtifactState.DONE)
        return InstalledArtifact(run.kind, version, path, skipped=True)

    def _finish(self, run: ArtifactRun, path: Path) -> InstalledArtifact:
        run.path = path
        run.advance(ArtifactState.DONE)
        return InstalledArtifact(run.kind, run.resolved_version, path)

    def install_controller(self, requested: Optional[str] = None) -> InstalledArtifact:
        """
        Install the controller archive.

        Args:
            requested: Tag to install, or None for the latest release

        Returns:
            InstalledArtifact for <install_dir>/<repo-short-name>-<version>

        Raises:
            InstallerError: On any failure (the run is marked FAILED)
        """
        run = ArtifactRun(
            kind=ArtifactKind.CONTROLLER,
            repository=RepositoryRef.parse(self._settings.controller_repo),
            requested_version=requested,
        )
        self.last_controller_run = run
        try:
            return self._install_controller(run)
        except InstallerError as e:
            run.fail(e)
            raise

    def _install_controller(self, run: ArtifactRun) -> InstalledArtifact:
        requested = check_requested_version(run.requested_version)
        run.requested_version = requested
        if requested:
            installed_dir = controller_install_dir(self._settings, requested)
            if installed_dir.is_dir():
                logger.info(f"Controller already installed at: {installed_dir} (skipping download)")
                return self._skip(run, requested, installed_dir)

        version = self._resolve(run)
        installed_dir = controller_install_dir(self._settings, version)
        if installed_dir.is_dir():
            logger.info(f"Controller already installed at: {installed_dir} (skipping download)")
            return self._skip(run, version, installed_dir)

        logger.info("Installing Interlinx Controller...")
        archive_name = controller_archive_name(self._settings, version)
        checksum_name = checksum_asset_name(archive_name)

        logger.info("Fetching controller release assets...")
        archive_ref = self._locator.locate(run.repository, version, archive_name)
        checksum_ref = self._locator.locate(run.repository, version, checksum_name)
        run.advance(ArtifactState.ASSET_LOCATED)

        archive_path = self._fetcher.fetch(DownloadTarget(
            ref=archive_ref,
            destination=self._download_dir / archive_name,
            description="controller tarball",
        ))
        checksum_path = self._fetcher.fetch(DownloadTarget(
            ref=checksum_ref,
            destination=self._download_dir / checksum_name,
            description="checksum file",
        ))
        run.advance(ArtifactState.DOWNLOADED)

        verify(archive_path, checksum_path)
        run.advance(ArtifactState.VERIFIED)

        install_archive(archive_path, self._settings.install_root)
        if not installed_dir.is_dir():
            raise LayoutMismatchError(installed_dir)
        run.advance(ArtifactState.INSTALLED)

        logger.info(f"Controller installed to: {installed_dir}")
        return self._finish(run, installed_dir)

    def install_agent(self, requested: Optional[str] = None) -> InstalledArtifact:
        """
        Download the agent executable into the working directory.

        Args:
            requested: Tag to install, or None for the latest release

        Returns:
            InstalledArtifact for ./<agent>-<version>-<platform>

        Raises:
            InstallerError: On any failure (the run is marked FAILED)
        """
        run = ArtifactRun(
            kind=ArtifactKind.AGENT,
            repository=RepositoryRef.parse(self._settings.agent_repo),
            requested_version=requested,
        )
        self.last_agent_run = run
        try:
            return self._install_agent(run)
        except InstallerError as e:
            run.fail(e)
            raise

    def _existing_agent(self, run: ArtifactRun, version: str) -> Optional[InstalledArtifact]:
        output = agent_output_path(self._settings, version, self._working_dir)
        if not output.is_file():
            return None
        logger.info(f"Agent already exists: {output.name} (skipping download)")
        try:
            make_executable(output)
        except OSError as e:
            raise InstallError(f"Failed to mark {output} executable", e)
        return self._skip(run, version, output)

    def _install_agent(self, run: ArtifactRun) -> InstalledArtifact:
        logger.info("Checking for Interlinx Agent...")
        requested = check_requested_version(run.requested_version)
        run.requested_version = requested
        if requested:
            existing = self._existing_agent(run, requested)
            if existing:
                return existing

        version = self._resolve(run)
        existing = self._existing_agent(run, version)
        if existing:
            return existing

        output = agent_output_path(self._settings, version, self._working_dir)
        asset_name = self._settings.agent_asset_name

        logger.info("Downloading Interlinx Agent...")
        ref = self._locator.locate(run.repository, version, asset_name)
        run.advance(ArtifactState.ASSET_LOCATED)

        downloaded = self._fetcher.fetch(DownloadTarget(
            ref=ref,
            destination=self._download_dir / asset_name,
            description="Interlinx Agent",
        ))
        run.advance(ArtifactState.DOWNLOADED)

        try:
            shutil.move(str(downloaded), str(output))
            make_executable(output)
        except OSError as e:
            raise InstallError(f"Failed to write agent to {output}", e)
        run.advance(ArtifactState.INSTALLED)

        logger.info(f"Agent downloaded to: {output.name} (executable)")
        return self._finish(run, output)


def run_bootstrap(
    settings: InstallerSettings,
    token: Optional[str] = None,
    controller_version: Optional[str] = None,
    agent_version: Optional[str] = None,
    include_agent: bool = True,
    working_dir: Optional[Path] = None,
    credential_manager: Optional[CredentialManager] = None,
    reader: Callable[[str], str] = getpass.getpass,
) -> BootstrapResult:
    """
    Run a complete bootstrap.

    The credential and the temporary download directory are released on
    every exit path. A controller failure aborts before the agent sequence;
    an installed controller is not rolled back if the agent fails.

    Args:
        settings: Installer settings
        token: Token from the command line, if any
        controller_version: Controller tag, or None for latest
        agent_version: Agent tag, or None for latest
        include_agent: Whether to run the agent sequence
        working_dir: Where the agent executable is written (default: cwd)
        credential_manager: Keyring lookup used when no token is given
        reader: Function used for the interactive token prompt

    Returns:
        BootstrapResult describing the installed artifacts

    Raises:
        InstallerError: On the first failure
    """
    with ExitStack() as stack:
        credential = stack.enter_context(
            acquire_credential(token, credential_manager, reader)
        )
        client = stack.enter_context(GitHubClient(
            credential,
            api_base=settings.api_base,
            timeout=settings.timeout,
        ))
        download_dir = Path(stack.enter_context(
            tempfile.TemporaryDirectory(prefix="interlinx-bootstrap-")
        ))

        orchestrator = Orchestrator(settings, client, download_dir, working_dir)
        controller = orchestrator.install_controller(controller_version)

        agent = None
        if include_agent:
            agent = orchestrator.install_agent(agent_version)

        return BootstrapResult(controller=controller, agent=agent)
