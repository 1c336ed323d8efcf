"""Archive extraction for the Interlinx bootstrap installer."""

import logging
import os
import tarfile
from pathlib import Path

from interlinx_bootstrap.exceptions import ExtractionFailedError

logger = logging.getLogger("interlinx_bootstrap.archive")


def _check_members(tf: tarfile.TarFile, root_dir: Path) -> None:
    """Refuse members that would land outside root_dir."""
    root = os.path.realpath(root_dir)
    for member in tf.getmembers():
        target = os.path.realpath(os.path.join(root, member.name))
        if target != root and not target.startswith(root + os.sep):
            raise ValueError(f"path traversal detected: {member.name}")
        if member.issym() or member.islnk():
            # hard link names are relative to the archive root, symlinks to their directory
            base = root if member.islnk() else os.path.dirname(target)
            link_target = os.path.realpath(os.path.join(base, member.linkname))
            if not link_target.startswith(root + os.sep):
                raise ValueError(f"link escapes install root: {member.name}")


def _safe_extractall(tf: tarfile.TarFile, root_dir: Path) -> None:
    """Extract everything, with the 'data' filter where tarfile supports it."""
    if hasattr(tarfile, "data_filter"):
        tf.extractall(root_dir, filter="data")
    else:
        _check_members(tf, root_dir)
        tf.extractall(root_dir)


def install_archive(archive_path: Path, root_dir: Path) -> Path:
    """
    Expand a .tar.gz archive under root_dir.

    The archive's own top-level directory is kept, so
    interlinx-controller-v1.4.0-linux-x64.tar.gz produces
    <root_dir>/interlinx-controller-v1.4.0/.

    Args:
        archive_path: Verified archive
        root_dir: Directory to expand into

    Returns:
        root_dir

    Raises:
        ExtractionFailedError: On any read, decode or write error
    """
    logger.info(f"Extracting to {root_dir}...")
    try:
        root_dir.mkdir(parents=True, exist_ok=True)
        with tarfile.open(archive_path, "r:gz") as tf:
            _safe_extractall(tf, root_dir)
    except (tarfile.TarError, EOFError, OSError, ValueError) as e:
        raise ExtractionFailedError(archive_path, e)

    logger.info("Extraction complete")
    return root_dir
