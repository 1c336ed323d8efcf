"""GitHub integration for the Interlinx bootstrap installer.

This module handles the release host:
- GitHubClient: authenticated GitHub releases API client
- Release models: RepositoryRef, GitHubRelease, ReleaseAsset, AssetRef
"""

from .models import AssetRef, DownloadTarget, GitHubRelease, ReleaseAsset, RepositoryRef
from .client import (
    GitHubClient,
    GitHubError,
    GitHubConnectionError,
    GitHubAuthError,
    GitHubRateLimitError,
    GitHubNotFoundError,
    GitHubResponseError,
)

__all__ = [
    # Release models
    "AssetRef",
    "DownloadTarget",
    "GitHubRelease",
    "ReleaseAsset",
    "RepositoryRef",
    # GitHub client
    "GitHubClient",
    "GitHubError",
    "GitHubConnectionError",
    "GitHubAuthError",
    "GitHubRateLimitError",
    "GitHubNotFoundError",
    "GitHubResponseError",
]
