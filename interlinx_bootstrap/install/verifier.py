"""SHA-256 checksum verification for downloaded archives."""

import hashlib
import logging
from pathlib import Path

from interlinx_bootstrap.exceptions import (
    ChecksumMismatchError,
    MalformedChecksumError,
    MissingChecksumFileError,
)

logger = logging.getLogger("interlinx_bootstrap.verifier")

# Read size when hashing
HASH_CHUNK_SIZE = 1024 * 1024


def sha256_file(path: Path) -> str:
    """Lowercase hex SHA-256 digest of a file."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def read_expected_checksum(checksum_path: Path) -> str:
    """
    Read the expected digest from a checksum file.

    Only the first whitespace-delimited token is used, so both a bare digest
    and sha256sum's "<digest>  <file name>" format work.

    Raises:
        MissingChecksumFileError: If the file does not exist
        MalformedChecksumError: If the file holds no token
    """
    if not checksum_path.is_file():
        raise MissingChecksumFileError(checksum_path)

    text = checksum_path.read_text(encoding="utf-8", errors="replace")
    tokens = text.split()
    if not tokens:
        raise MalformedChecksumError(checksum_path)
    return tokens[0]


def verify(payload_path: Path, checksum_path: Path) -> None:
    """
    Verify a payload against its checksum file.

    The comparison is exact: the digests must match character for
    character, case included.

    Raises:
        MissingChecksumFileError: If the checksum file does not exist
        MalformedChecksumError: If the checksum file holds no digest
        ChecksumMismatchError: If the digests differ
    """
    logger.info("Verifying SHA256 checksum...")
    expected = read_expected_checksum(checksum_path)
    actual = sha256_file(payload_path)

    if expected != actual:
        raise ChecksumMismatchError(expected, actual)

    logger.info("Checksum verified successfully")
