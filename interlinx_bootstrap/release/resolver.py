"""Release version resolution for the Interlinx bootstrap installer.

Turns "latest" or a requested tag into the concrete tag used for the rest
of an artifact's run.
"""

import logging
from typing import Optional

from interlinx_bootstrap.exceptions import (
    BadCredentialsError,
    MalformedResponseError,
    ReleaseNotFoundError,
    ResolutionError,
)
from interlinx_bootstrap.github.client import (
    GitHubAuthError,
    GitHubClient,
    GitHubError,
    GitHubNotFoundError,
    GitHubResponseError,
)
from interlinx_bootstrap.github.models import GitHubRelease, RepositoryRef

logger = logging.getLogger("interlinx_bootstrap.resolver")


def fetch_release(
    client: GitHubClient,
    repo: RepositoryRef,
    tag: Optional[str] = None
) -> GitHubRelease:
    """
    Fetch a release document, translating GitHub errors.

    Args:
        client: Authenticated GitHub client
        repo: Repository to query
        tag: Release tag, or None for the latest release

    Returns:
        GitHubRelease as returned by the API

    Raises:
        BadCredentialsError: If the token is rejected
        ReleaseNotFoundError: If the repository or tag does not exist
        MalformedResponseError: If the body is not a release document
        ResolutionError: For rate limiting and transport failures
    """
    url = client.release_url(repo, tag)
    try:
        if tag is None:
            return client.get_latest_release(repo)
        return client.get_release_by_tag(repo, tag)
    except GitHubAuthError as e:
        raise BadCredentialsError(repo.full_name, e)
    except GitHubNotFoundError as e:
        raise ReleaseNotFoundError(repo.full_name, tag, e)
    except GitHubResponseError as e:
        raise MalformedResponseError(url, str(e))
    except GitHubError as e:
        raise ResolutionError(f"Failed to fetch release from {repo}", e)


class ReleaseResolver:
    """Resolves requested versions against a repository's releases."""

    def __init__(self, client: GitHubClient):
        """
        Initialize the resolver.

        Args:
            client: Authenticated GitHub client
        """
        self._client = client

    def resolve(self, repo: RepositoryRef, requested: Optional[str] = None) -> str:
        """
        Resolve the version to install.

        Args:
            repo: Repository to query
            requested: Tag asked for, or None for the latest release

        Returns:
            The requested tag unchanged once confirmed to exist, or the tag
            of the latest release

        Raises:
            BadCredentialsError: If the token is rejected
            ReleaseNotFoundError: If the repository or tag does not exist
            MalformedResponseError: If no tag can be read from the response
            ResolutionError: For other failures
        """
        if requested:
            logger.info(f"Verifying version {requested} exists in {repo}...")
            fetch_release(self._client, repo, requested)
            return requested

        logger.info(f"Fetching latest release version for {repo}...")
        release = fetch_release(self._client, repo)
        if not release.tag_name or not isinstance(release.tag_name, str):
            raise MalformedResponseError(
                self._client.release_url(repo),
                "release has no tag_name",
            )

        logger.info(f"Latest version: {release.tag_name}")
        return release.tag_name
