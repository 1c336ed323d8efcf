"""Authenticated asset downloads for the Interlinx bootstrap installer."""

import logging
from pathlib import Path

import requests

from interlinx_bootstrap.exceptions import (
    EmptyPayloadError,
    FetchError,
    FetchNotFoundError,
    FetchUnauthorizedError,
)
from interlinx_bootstrap.github.client import CHUNK_SIZE, GitHubClient, GitHubError
from interlinx_bootstrap.github.models import DownloadTarget

logger = logging.getLogger("interlinx_bootstrap.fetcher")


class Fetcher:
    """Streams release assets to disk and classifies failures."""

    def __init__(self, client: GitHubClient):
        """
        Initialize the fetcher.

        Args:
            client: Authenticated GitHub client
        """
        self._client = client

    def fetch(self, target: DownloadTarget) -> Path:
        """
        Download one asset.

        A single attempt is made. On failure any partial file is removed.

        Args:
            target: Asset reference, destination path and description

        Returns:
            The destination path, holding a non-empty file

        Raises:
            FetchUnauthorizedError: On HTTP 401/403
            FetchNotFoundError: On HTTP 404
            EmptyPayloadError: If nothing was written
            FetchError: On any other failure
        """
        logger.info(f"Downloading {target.description}...")
        try:
            response = self._client.open_download(target.ref.url)
        except GitHubError as e:
            raise FetchError(target.description, original_error=e)

        try:
            self._check_status(response.status_code, target)
            written = self._write_body(response, target)
        except FetchError:
            self._discard(target.destination)
            raise
        finally:
            response.close()

        if not target.destination.is_file() or target.destination.stat().st_size == 0:
            self._discard(target.destination)
            raise EmptyPayloadError(target.description, target.destination)

        logger.debug(f"Downloaded {written} bytes to {target.destination}")
        return target.destination

    @staticmethod
    def _check_status(status: int, target: DownloadTarget) -> None:
        if 200 <= status < 300:
            return
        if status in (401, 403):
            raise FetchUnauthorizedError(target.description, status)
        if status == 404:
            raise FetchNotFoundError(target.description, target.ref.url)
        raise FetchError(target.description, status_code=status)

    @staticmethod
    def _write_body(response: requests.Response, target: DownloadTarget) -> int:
        written = 0
        try:
            target.destination.parent.mkdir(parents=True, exist_ok=True)
            with open(target.destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
        except requests.exceptions.RequestException as e:
            raise FetchError(target.description, original_error=e)
        except OSError as e:
            raise FetchError(target.description, original_error=e)
        return written

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            if path.is_file():
                path.unlink()
        except OSError as e:
            logger.warning(f"Failed to remove partial download {path}: {e}")
