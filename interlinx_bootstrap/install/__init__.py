"""Installation module for the Interlinx bootstrap installer.

- verify: SHA-256 checksum verification
- install_archive: .tar.gz extraction under the install root
- Orchestrator / run_bootstrap: per-artifact install sequences
"""

from .verifier import sha256_file, verify
from .archive import install_archive
from .orchestrator import (
    ArtifactKind,
    ArtifactRun,
    ArtifactState,
    BootstrapResult,
    InstalledArtifact,
    Orchestrator,
    run_bootstrap,
)

__all__ = [
    "ArtifactKind",
    "ArtifactRun",
    "ArtifactState",
    "BootstrapResult",
    "InstalledArtifact",
    "Orchestrator",
    "install_archive",
    "run_bootstrap",
    "sha256_file",
    "verify",
]
