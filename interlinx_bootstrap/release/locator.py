"""Release asset lookup for the Interlinx bootstrap installer."""

import logging
from typing import Dict, Tuple

from interlinx_bootstrap.exceptions import AssetNotFoundError, MalformedResponseError
from interlinx_bootstrap.github.client import GitHubClient
from interlinx_bootstrap.github.models import AssetRef, GitHubRelease, RepositoryRef
from interlinx_bootstrap.release.resolver import fetch_release

logger = logging.getLogger("interlinx_bootstrap.locator")


class AssetLocator:
    """Finds named assets in a release and builds their download references.

    Release documents are cached per (repository, tag) for the lifetime of
    the locator, so an archive and its checksum cost one API request.
    """

    def __init__(self, client: GitHubClient):
        self._client = client
        self._releases: Dict[Tuple[RepositoryRef, str], GitHubRelease] = {}

    def _get_release(self, repo: RepositoryRef, version: str) -> GitHubRelease:
        key = (repo, version)
        if key not in self._releases:
            self._releases[key] = fetch_release(self._client, repo, version)
        return self._releases[key]

    def locate(self, repo: RepositoryRef, version: str, asset_name: str) -> AssetRef:
        """
        Locate an asset by exact name.

        Args:
            repo: Repository holding the release
            version: Resolved release tag
            asset_name: Full, case-sensitive asset name

        Returns:
            AssetRef pointing at the API download endpoint

        Raises:
            AssetNotFoundError: If no asset has that name
            MalformedResponseError: If the matching asset has no id
            ResolutionError: If the release cannot be fetched
        """
        release = self._get_release(repo, version)
        asset = release.get_asset(asset_name)
        if asset is None:
            logger.debug(f"Release {version} assets: {release.asset_names}")
            raise AssetNotFoundError(asset_name, version)

        if asset.asset_id is None or isinstance(asset.asset_id, bool):
            raise MalformedResponseError(
                self._client.release_url(repo, version),
                f"asset '{asset_name}' has no id",
            )

        logger.debug(f"Found asset {asset_name} (id {asset.asset_id})")
        return AssetRef(
            repository=repo,
            asset_id=asset.asset_id,
            name=asset.name,
            url=self._client.asset_url(repo, asset.asset_id),
        )
