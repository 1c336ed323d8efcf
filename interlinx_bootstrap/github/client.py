"""GitHub API client for Interlinx releases.

Fetches release information from (private) repositories and opens
authenticated asset downloads.
"""

import logging
from typing import Optional, Union
from urllib.parse import quote

import requests

from interlinx_bootstrap.config.credentials import Credential
from interlinx_bootstrap.github.models import GitHubRelease, RepositoryRef

logger = logging.getLogger("interlinx_bootstrap.github_client")


# GitHub API constants
GITHUB_API_BASE = "https://api.github.com"
API_MEDIA_TYPE = "application/vnd.github.v3+json"
BINARY_MEDIA_TYPE = "application/octet-stream"
USER_AGENT = "InterlinxBootstrap/1.0"

# Request timeout in seconds
REQUEST_TIMEOUT = 30

# Download chunk size in bytes
CHUNK_SIZE = 8192


class GitHubError(Exception):
    """Base exception for GitHub API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubConnectionError(GitHubError):
    """Raised when unable to connect to GitHub."""
    pass


class GitHubAuthError(GitHubError):
    """Raised when GitHub rejects the token (401/403)."""
    pass


class GitHubRateLimitError(GitHubError):
    """Raised when GitHub rate limit is exceeded."""
    pass


class GitHubNotFoundError(GitHubError):
    """Raised when repository or release is not found."""
    pass


class GitHubResponseError(GitHubError):
    """Raised when a response body is not the expected JSON document."""
    pass


class GitHubClient:
    """Client for the GitHub releases API, authenticated with one token."""

    def __init__(
        self,
        credential: Credential,
        api_base: str = GITHUB_API_BASE,
        timeout: int = REQUEST_TIMEOUT
    ):
        """
        Initialize GitHub client.

        Args:
            credential: Token sent with every request
            api_base: API root URL
            timeout: Request timeout in seconds
        """
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": API_MEDIA_TYPE,
            "User-Agent": USER_AGENT,
            "Authorization": f"token {credential.token}",
        })

    @property
    def api_base(self) -> str:
        """API root URL without trailing slash."""
        return self._api_base

    def releases_url(self, repo: RepositoryRef) -> str:
        """Get the releases collection URL of a repository."""
        return f"{self._api_base}/repos/{repo.owner}/{repo.name}/releases"

    def release_url(self, repo: RepositoryRef, tag: Optional[str] = None) -> str:
        """Get the URL of one release, or of the latest release when tag is None."""
        if tag is None:
            return f"{self.releases_url(repo)}/latest"
        return f"{self.releases_url(repo)}/tags/{quote(tag, safe='')}"

    def asset_url(self, repo: RepositoryRef, asset_id: int) -> str:
        """Get the API download URL of a release asset."""
        return f"{self.releases_url(repo)}/assets/{asset_id}"

    def _make_request(self, url: str) -> Union[dict, list]:
        """
        Make a GET request to GitHub API.

        Args:
            url: Full URL to request

        Returns:
            JSON response

        Raises:
            GitHubConnectionError: If unable to connect
            GitHubAuthError: If the token is rejected
            GitHubRateLimitError: If rate limit exceeded
            GitHubNotFoundError: If resource not found
            GitHubResponseError: If the body is not JSON
            GitHubError: For other errors
        """
        try:
            logger.debug(f"Making request to: {url}")
            response = self._session.get(url, timeout=self._timeout)
        except requests.exceptions.Timeout:
            logger.error("GitHub request timed out")
            raise GitHubConnectionError("Request timed out connecting to GitHub")
        except requests.exceptions.ConnectionError as e:
            logger.error(f"GitHub connection error: {e}")
            raise GitHubConnectionError(
                "Unable to connect to GitHub. Check your internet connection."
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"GitHub request error: {e}")
            raise GitHubError(f"Request failed: {e}")

        status = response.status_code
        if status == 200:
            try:
                return response.json()
            except ValueError as e:
                raise GitHubResponseError(f"Response is not valid JSON: {e}", status)
        elif status == 404:
            raise GitHubNotFoundError(f"Resource not found: {url}", status)
        elif status == 401:
            raise GitHubAuthError("Bad credentials", status)
        elif status in (403, 429):
            if status == 429 or "rate limit" in response.text.lower():
                raise GitHubRateLimitError("GitHub API rate limit exceeded", status)
            raise GitHubAuthError(f"Access denied: {response.text}", status)
        else:
            raise GitHubError(
                f"GitHub API error {status}: {response.text}", status
            )

    def _get_release(self, url: str) -> GitHubRelease:
        data = self._make_request(url)
        if not isinstance(data, dict):
            raise GitHubResponseError(
                f"Expected a release object, got {type(data).__name__}", 200
            )
        return GitHubRelease.from_api_response(data)

    def get_latest_release(self, repo: RepositoryRef) -> GitHubRelease:
        """
        Get the latest release from a repository.

        Returns:
            GitHubRelease representing the latest release

        Raises:
            GitHubNotFoundError: If no releases found or no access
            GitHubError: For other errors
        """
        url = self.release_url(repo)
        logger.debug(f"Fetching latest release of {repo}")
        return self._get_release(url)

    def get_release_by_tag(self, repo: RepositoryRef, tag: str) -> GitHubRelease:
        """
        Get a specific release by tag name.

        Args:
            repo: Repository to query
            tag: Release tag (e.g., "v1.4.0")

        Returns:
            GitHubRelease for the specified tag

        Raises:
            GitHubNotFoundError: If release not found
            GitHubError: For other errors
        """
        url = self.release_url(repo, tag)
        logger.debug(f"Fetching release of {repo} with tag: {tag}")
        return self._get_release(url)

    def open_download(self, url: str) -> requests.Response:
        """
        Start a binary download, following redirects.

        The caller reads the body and must close the response. requests
        drops the Authorization header when a redirect leaves the API host,
        which the asset storage backend requires.

        Raises:
            GitHubConnectionError: If unable to connect
            GitHubError: For other transport errors
        """
        try:
            logger.debug(f"Opening download: {url}")
            return self._session.get(
                url,
                headers={"Accept": BINARY_MEDIA_TYPE},
                stream=True,
                allow_redirects=True,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout:
            raise GitHubConnectionError("Download timed out")
        except requests.exceptions.ConnectionError as e:
            raise GitHubConnectionError(f"Download failed: {e}")
        except requests.exceptions.RequestException as e:
            raise GitHubError(f"Download failed: {e}")

    def close(self) -> None:
        """Forget the token and close the HTTP session."""
        self._session.headers.pop("Authorization", None)
        self._session.close()

    def __enter__(self) -> "GitHubClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
