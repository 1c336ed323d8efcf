"""GitHub credential handling for the Interlinx bootstrap installer.

The access token is taken from the command line, the environment, the
system keyring (Windows Credential Manager, macOS Keychain, Linux Secret
Service) or an interactive prompt, in that order. It is held in memory
only and cleared when the run ends.
"""

import getpass
import logging
import os
import sys
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import keyring
from keyring.errors import KeyringError

from interlinx_bootstrap.exceptions import ConfigurationError
from interlinx_bootstrap.utils.validators import validate_token

logger = logging.getLogger("interlinx_bootstrap.credentials")


TOKEN_ENV_VAR = "GITHUB_TOKEN"

PROMPT_TEXT = "Enter your GitHub PAT: "

PROMPT_BANNER = """
GitHub Personal Access Token (PAT) required to download from private repository.
Your PAT must have 'repo' or 'repo:private_repo' scope.

Create a PAT at: https://github.com/settings/tokens
"""


class Credential:
    """A GitHub access token that can be wiped."""

    def __init__(self, token: str, source: str = "argument"):
        self._token: Optional[str] = token
        self.source = source

    @property
    def token(self) -> str:
        """The token value."""
        if self._token is None:
            raise ConfigurationError("GitHub token has already been cleared")
        return self._token

    @property
    def is_cleared(self) -> bool:
        """True once clear() has run."""
        return self._token is None

    def clear(self) -> None:
        """Drop the token value."""
        self._token = None

    def __repr__(self) -> str:
        state = "cleared" if self.is_cleared else "set"
        return f"Credential(source={self.source!r}, {state})"


class CredentialManager:
    """Read-only token lookup in the system keyring."""

    SERVICE_NAME = "interlinx-bootstrap"
    USERNAME = "github"

    def get_token(self) -> Optional[str]:
        """
        Retrieve a token stored by the operator.

        Returns:
            Token string or None if not found or keyring unavailable
        """
        try:
            return keyring.get_password(self.SERVICE_NAME, self.USERNAME)
        except KeyringError as e:
            logger.debug(f"Keyring lookup failed: {e}")
            return None


def prompt_for_token(reader: Callable[[str], str] = getpass.getpass) -> str:
    """
    Ask for the token without echoing it.

    getpass reads from the controlling terminal even when stdin is a pipe,
    so this also works when the installer is fed to a shell by curl.

    Args:
        reader: Function used to read the hidden input

    Returns:
        The entered token, stripped
    """
    print(PROMPT_BANNER, file=sys.stderr)
    try:
        return reader(PROMPT_TEXT).strip()
    except EOFError:
        return ""


def resolve_token(
    token: Optional[str] = None,
    credential_manager: Optional[CredentialManager] = None,
    reader: Callable[[str], str] = getpass.getpass,
) -> Credential:
    """
    Find a token from the first source that has one.

    Args:
        token: Token given on the command line
        credential_manager: Keyring lookup (default: CredentialManager())
        reader: Function used for the interactive prompt

    Returns:
        Credential for the run

    Raises:
        ConfigurationError: If no usable token was provided
    """
    source = "argument"
    if not token:
        token = os.environ.get(TOKEN_ENV_VAR)
        source = "environment"
    if not token:
        manager = credential_manager or CredentialManager()
        token = manager.get_token()
        source = "keyring"
    if not token:
        token = prompt_for_token(reader)
        source = "prompt"

    is_valid, error = validate_token(token)
    if not is_valid:
        raise ConfigurationError(error)

    logger.debug(f"Using GitHub token from {source}")
    return Credential(token.strip(), source=source)


@contextmanager
def acquire_credential(
    token: Optional[str] = None,
    credential_manager: Optional[CredentialManager] = None,
    reader: Callable[[str], str] = getpass.getpass,
) -> Iterator[Credential]:
    """
    Provide a credential for the duration of a run.

    The credential is cleared on every exit path, including failures.
    """
    credential = resolve_token(token, credential_manager, reader)
    try:
        yield credential
    finally:
        credential.clear()
        logger.debug("GitHub token cleared")
