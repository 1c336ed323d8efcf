"""Installer exceptions for the Interlinx bootstrap installer.

Custom exception hierarchy for every fatal failure of a bootstrap run,
so the entry point can report a single clear message per failure.
"""

from pathlib import Path
from typing import Optional


class InstallerError(Exception):
    """Base exception for all installer errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class ConfigurationError(InstallerError):
    """Invalid invocation, settings, privileges or credential."""
    pass


# Release resolution

class ResolutionError(InstallerError):
    """Failed to resolve a release version."""
    pass


class BadCredentialsError(ResolutionError):
    """GitHub rejected the access token."""

    def __init__(self, repository: str, original_error: Exception = None):
        self.repository = repository
        message = (
            f"Invalid GitHub token for {repository}. "
            "Please check your Personal Access Token."
        )
        super().__init__(message, original_error)


class ReleaseNotFoundError(ResolutionError):
    """Repository or release tag not found (or token lacks access)."""

    def __init__(
        self,
        repository: str,
        version: Optional[str] = None,
        original_error: Exception = None
    ):
        self.repository = repository
        self.version = version
        if version:
            message = f"Version {version} not found in repository {repository}"
        else:
            message = (
                f"Repository {repository} not found or token lacks access. "
                "Ensure your PAT has 'repo' scope."
            )
        super().__init__(message, original_error)


class MalformedResponseError(ResolutionError):
    """GitHub returned a document that could not be interpreted."""

    def __init__(self, url: str, detail: str, original_error: Exception = None):
        self.url = url
        self.detail = detail
        message = f"Unexpected response from {url}: {detail}"
        super().__init__(message, original_error)


class AssetNotFoundError(InstallerError):
    """Named asset is not attached to the release."""

    def __init__(self, asset_name: str, version: str):
        self.asset_name = asset_name
        self.version = version
        message = f"Asset '{asset_name}' not found in release {version}"
        super().__init__(message)


# Transfers

class FetchError(InstallerError):
    """Asset download failed."""

    def __init__(
        self,
        description: str,
        status_code: Optional[int] = None,
        original_error: Exception = None
    ):
        self.description = description
        self.status_code = status_code
        if status_code is None:
            message = f"Failed to download {description}"
        else:
            message = f"Download of {description} failed with HTTP code {status_code}"
        super().__init__(message, original_error)


class FetchUnauthorizedError(FetchError):
    """Download rejected: token invalid or missing scope (401/403)."""

    def __init__(self, description: str, status_code: int):
        super().__init__(description, status_code)
        self.message = (
            f"Authentication failed downloading {description} "
            f"(HTTP {status_code}). Please check your GitHub token."
        )


class FetchNotFoundError(FetchError):
    """Download URL answered 404."""

    def __init__(self, description: str, url: str):
        super().__init__(description, 404)
        self.url = url
        self.message = f"File not found downloading {description} (HTTP 404). URL: {url}"


class EmptyPayloadError(FetchError):
    """Transfer finished but produced no bytes on disk."""

    def __init__(self, description: str, destination: Path):
        super().__init__(description)
        self.destination = destination
        self.message = f"Downloaded file is missing or empty: {destination}"


# Integrity

class IntegrityError(InstallerError):
    """Checksum verification failed."""
    pass


class MissingChecksumFileError(IntegrityError):
    """Checksum file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Checksum file not found: {path}")


class MalformedChecksumError(IntegrityError):
    """Checksum file has no digest token."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Could not read checksum from file: {path}")


class ChecksumMismatchError(IntegrityError):
    """Payload digest differs from the expected value."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        message = (
            "Checksum verification failed! "
            f"Expected: {expected} Actual: {actual}"
        )
        super().__init__(message)


# Installation

class InstallError(InstallerError):
    """Archive installation failed."""
    pass


class ExtractionFailedError(InstallError):
    """Archive could not be decoded or written."""

    def __init__(self, archive_path: Path, original_error: Exception = None):
        self.archive_path = archive_path
        super().__init__(f"Failed to extract {archive_path.name}", original_error)


class LayoutMismatchError(InstallError):
    """Expected directory missing after extraction."""

    def __init__(self, expected_dir: Path):
        self.expected_dir = expected_dir
        message = f"Installation directory not found after extraction: {expected_dir}"
        super().__init__(message)
