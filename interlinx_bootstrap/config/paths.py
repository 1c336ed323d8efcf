"""Artifact names and install paths for the Interlinx bootstrap installer.

Every file and directory name a run touches is derived here from the
settings and the resolved version, so the same version is used for all of
them.
"""

from pathlib import Path

from interlinx_bootstrap.config.settings import InstallerSettings


# Suffix of the checksum asset published next to each archive
CHECKSUM_SUFFIX = ".sha256"

# Controller archives are gzip-compressed tarballs
ARCHIVE_SUFFIX = ".tar.gz"


def repository_short_name(repository: str) -> str:
    """
    Get the repository name without its owner.

    Args:
        repository: "owner/name" slug

    Returns:
        The name part (e.g., "interlinx-controller")
    """
    return repository.rsplit("/", 1)[-1]


def controller_archive_name(settings: InstallerSettings, version: str) -> str:
    """
    Get the release asset name of the controller archive.

    Example: interlinx-controller-v1.4.0-linux-x64.tar.gz
    """
    short_name = repository_short_name(settings.controller_repo)
    return f"{short_name}-{version}-{settings.platform_tag}{ARCHIVE_SUFFIX}"


def checksum_asset_name(asset_name: str) -> str:
    """Get the checksum asset name for an asset."""
    return f"{asset_name}{CHECKSUM_SUFFIX}"


def controller_install_dir(settings: InstallerSettings, version: str) -> Path:
    """
    Get the directory the controller archive expands to.

    Returns:
        <install_dir>/<repo-short-name>-<version>
    """
    short_name = repository_short_name(settings.controller_repo)
    return settings.install_root / f"{short_name}-{version}"


def agent_output_name(settings: InstallerSettings, version: str) -> str:
    """
    Get the local file name of the agent executable.

    Example: agent-v1.0.0-linux.run
    """
    short_name = settings.agent_asset_name.split("-", 1)[0]
    return f"{short_name}-{version}-{settings.agent_platform_suffix}"


def agent_output_path(
    settings: InstallerSettings,
    version: str,
    working_dir: Path
) -> Path:
    """Get the path the agent executable is written to."""
    return working_dir / agent_output_name(settings, version)
