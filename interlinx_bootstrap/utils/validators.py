"""Input validators for the Interlinx bootstrap installer.

Provides validation functions for user inputs like repository slugs,
release tags and access tokens.
"""

import re
from typing import Optional, Tuple


# owner/name, as GitHub accepts them
REPOSITORY_PATTERN = re.compile(
    r'^(?!-)[A-Za-z0-9-]{1,39}/[A-Za-z0-9._-]{1,100}$'
)

# Tags end up in a URL path segment and in file names
VERSION_TAG_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9._+-]*$')

MAX_VERSION_LENGTH = 128


def validate_repository(repository: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a GitHub repository slug.

    Args:
        repository: "owner/name" string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(repository, str) or not repository.strip():
        return False, "Repository is required"

    repository = repository.strip()

    if REPOSITORY_PATTERN.match(repository):
        return True, None

    return False, f"Invalid repository format (expected owner/name): {repository}"


def validate_version_tag(version: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a release tag given on the command line.

    Args:
        version: Tag string to validate (e.g., "v1.4.0")

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(version, str) or not version.strip():
        return False, "Version is required"

    version = version.strip()

    if len(version) > MAX_VERSION_LENGTH:
        return False, f"Version too long ({len(version)} > {MAX_VERSION_LENGTH} characters)"

    if ".." in version:
        return False, f"Invalid version tag: {version}"

    if VERSION_TAG_PATTERN.match(version):
        return True, None

    return False, f"Invalid version tag: {version}"


def validate_token(token: str) -> Tuple[bool, Optional[str]]:
    """
    Validate an access token.

    Only checks that the token is usable in an HTTP header; GitHub decides
    whether it is actually valid.

    Args:
        token: Token string to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(token, str) or not token.strip():
        return False, "GitHub token is required"

    if any(c.isspace() for c in token.strip()):
        return False, "GitHub token must not contain whitespace"

    return True, None


def validate_timeout(timeout: int) -> Tuple[bool, Optional[str]]:
    """
    Validate a request timeout value in seconds.

    Args:
        timeout: Timeout in seconds

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(timeout, bool) or not isinstance(timeout, int):
        try:
            timeout = int(timeout)
        except (ValueError, TypeError):
            return False, "Timeout must be a number"

    if timeout < 5 or timeout > 600:
        return False, f"Timeout must be between 5 and 600 seconds, got {timeout}"

    return True, None
