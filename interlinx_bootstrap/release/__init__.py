"""Release resolution and download for the Interlinx bootstrap installer.

- ReleaseResolver: "latest" or requested tag to concrete version
- AssetLocator: asset name to authenticated download reference
- Fetcher: streamed, classified asset downloads
"""

from .resolver import ReleaseResolver, fetch_release
from .locator import AssetLocator
from .fetcher import Fetcher

__all__ = [
    "AssetLocator",
    "Fetcher",
    "ReleaseResolver",
    "fetch_release",
]
