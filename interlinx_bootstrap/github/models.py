"""Release data models for the Interlinx bootstrap installer.

Defines dataclasses for repositories, releases and their assets as
returned by the GitHub releases API.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from interlinx_bootstrap.utils.validators import validate_repository


@dataclass(frozen=True)
class RepositoryRef:
    """A GitHub repository (owner/name pair)."""
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """The "owner/name" slug."""
        return f"{self.owner}/{self.name}"

    @property
    def short_name(self) -> str:
        """Repository name without owner."""
        return self.name

    @classmethod
    def parse(cls, slug: str) -> "RepositoryRef":
        """
        Create a RepositoryRef from an "owner/name" slug.

        Raises:
            ValueError: If the slug is not a valid repository
        """
        is_valid, error = validate_repository(slug)
        if not is_valid:
            raise ValueError(error)
        owner, name = slug.strip().split("/", 1)
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return self.full_name


@dataclass
class ReleaseAsset:
    """Represents a downloadable asset from a GitHub release."""
    asset_id: Optional[int]
    name: str

    @classmethod
    def from_api_response(cls, data: dict) -> "ReleaseAsset":
        """Create ReleaseAsset from GitHub API response."""
        return cls(
            asset_id=data.get("id"),
            name=data.get("name", ""),
        )


@dataclass
class GitHubRelease:
    """Represents a GitHub release with its assets."""
    tag_name: str
    assets: List[ReleaseAsset] = field(default_factory=list)

    @property
    def asset_names(self) -> List[str]:
        """Names of all attached assets, in API order."""
        return [a.name for a in self.assets]

    def get_asset(self, name: str) -> Optional[ReleaseAsset]:
        """Get the first asset whose name is exactly `name`."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None

    @classmethod
    def from_api_response(cls, data: dict) -> "GitHubRelease":
        """Create GitHubRelease from GitHub API response."""
        assets = [
            ReleaseAsset.from_api_response(a)
            for a in data.get("assets") or []
            if isinstance(a, dict)
        ]

        return cls(
            tag_name=data.get("tag_name") or "",
            assets=assets,
        )


@dataclass(frozen=True)
class AssetRef:
    """Authenticated download reference for one release asset.

    `url` is the API asset endpoint, which honours the Authorization
    header; the public browser download URL does not work for private
    repositories.
    """
    repository: RepositoryRef
    asset_id: int
    name: str
    url: str


@dataclass(frozen=True)
class DownloadTarget:
    """One transfer: what to fetch, where to put it, how to describe it."""
    ref: AssetRef
    destination: Path
    description: str
