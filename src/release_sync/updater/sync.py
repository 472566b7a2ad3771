"""Keep a cached asset in step with the latest GitHub release.

Every call re-derives its state from disk and the releases API: the stored
tag is compared with the latest release tag and the asset is downloaded only
when they differ or the cached file is missing.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Union

import requests

from release_sync.updater.downloader import ProgressCallback, download_file
from release_sync.updater.github_client import (
    GITHUB_API_BASE,
    REQUEST_TIMEOUT,
    GitHubClient,
)
from release_sync.updater.tag_store import (
    discard_stored_tag,
    read_stored_tag,
    write_stored_tag,
)

logger = logging.getLogger("release_sync.sync")


@dataclass
class SyncResult:
    """Outcome of a sync."""
    tag: str
    updated: bool
    tag_write_error: Optional[str] = None

    @property
    def has_warning(self) -> bool:
        """True if the content was updated but its tag could not be stored."""
        return self.tag_write_error is not None

    def __iter__(self) -> Iterator:
        """Unpack as (tag, updated)."""
        return iter((self.tag, self.updated))


class ReleaseSync:
    """Downloads a release asset into a local cache when its tag changes."""

    def __init__(
        self,
        client: GitHubClient,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Initialize the sync.

        Args:
            client: GitHub client for metadata and downloads
            progress_callback: Optional callback for download progress
        """
        self._client = client
        self._progress_callback = progress_callback

    @property
    def client(self) -> GitHubClient:
        """GitHub client used by this sync."""
        return self._client

    def sync(
        self,
        repo: str,
        asset_name: str,
        cache_path: Union[str, Path],
    ) -> SyncResult:
        """
        Make cache_path hold the asset of the latest release.

        Args:
            repo: Repository identifier (owner/name)
            asset_name: Exact asset file name
            cache_path: Local path of the cached asset

        Returns:
            SyncResult with the latest tag and whether new content was written

        Raises:
            ReleaseSyncError: If the lookup or the download fails; the cached
                content is left untouched
        """
        cache_path = Path(cache_path)
        tag, download_url = self._client.fetch_latest_release(repo, asset_name)

        if not cache_path.exists():
            # A tag without content cannot be trusted
            if discard_stored_tag(cache_path):
                logger.info(f"Cache file {cache_path} missing, discarded stale tag")
        elif read_stored_tag(cache_path) == tag:
            logger.info(f"{cache_path.name} is up to date ({tag})")
            return SyncResult(tag=tag, updated=False)

        download_file(
            self._client,
            download_url,
            cache_path,
            progress_callback=self._progress_callback,
        )

        result = SyncResult(tag=tag, updated=True)
        try:
            write_stored_tag(cache_path, tag)
        except OSError as e:
            logger.warning(f"Failed to store tag {tag} for {cache_path}: {e}")
            result.tag_write_error = str(e)

        logger.info(f"Updated {cache_path.name} to {tag}")
        return result


def sync_release(
    repo: str,
    asset_name: str,
    cache_path: Union[str, Path],
    token: Optional[str] = None,
    api_base: str = GITHUB_API_BASE,
    session: Optional[requests.Session] = None,
    timeout: int = REQUEST_TIMEOUT,
    progress_callback: Optional[ProgressCallback] = None,
) -> SyncResult:
    """
    One-shot sync of a release asset into cache_path.

    Args:
        repo: Repository identifier (owner/name)
        asset_name: Exact asset file name
        cache_path: Local path of the cached asset
        token: Optional access token
        api_base: Base URL of the releases API
        session: Optional HTTP session (left open)
        timeout: Request timeout in seconds
        progress_callback: Optional callback for download progress

    Returns:
        SyncResult with the latest tag and whether new content was written
    """
    with GitHubClient(
        token=token,
        api_base=api_base,
        timeout=timeout,
        session=session,
    ) as client:
        return ReleaseSync(client, progress_callback).sync(repo, asset_name, cache_path)
