"""Atomic asset downloader.

Streams a release asset into a temporary file next to the destination and
renames it into place, so the destination always holds either the previous
or the new complete content.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import requests

from release_sync.updater.exceptions import RenameError, WriteError
from release_sync.updater.github_client import GitHubClient
from release_sync.updater.tag_store import TAG_SUFFIX

logger = logging.getLogger("release_sync.downloader")

# Bytes read from the response per write
CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadProgress:
    """Progress information for a download operation."""
    asset_name: str
    bytes_downloaded: int
    total_bytes: int

    @property
    def percentage(self) -> float:
        """Download progress as percentage."""
        if self.total_bytes == 0:
            return 0.0
        return (self.bytes_downloaded / self.total_bytes) * 100


# Progress callback type
ProgressCallback = Callable[[DownloadProgress], None]


def cleanup_stale_temp_files(dest_path: Union[str, Path]) -> int:
    """
    Remove temp files left behind by interrupted downloads.

    Removes files in the destination directory named ``<base>.*``, keeping
    ``<base>`` itself and its ``<base>.tag`` sidecar.

    Args:
        dest_path: Destination path of the download

    Returns:
        Number of files removed
    """
    dest_path = Path(dest_path)
    prefix = dest_path.name + "."
    tag_file = dest_path.name + TAG_SUFFIX

    try:
        entries = list(os.scandir(dest_path.parent))
    except OSError as e:
        logger.debug(f"Skipping temp file cleanup in {dest_path.parent}: {e}")
        return 0

    removed = 0
    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            continue
        if not entry.name.startswith(prefix) or entry.name == tag_file:
            continue
        try:
            os.remove(entry.path)
            removed += 1
            logger.debug(f"Removed stale temp file: {entry.path}")
        except OSError as e:
            logger.debug(f"Failed to remove {entry.path}: {e}")

    if removed:
        logger.info(f"Removed {removed} stale temp file(s) for {dest_path.name}")
    return removed


def _content_length(response: requests.Response) -> int:
    """Size announced by the response, 0 if unknown."""
    try:
        return int(response.headers.get("content-length", 0))
    except (TypeError, ValueError):
        return 0


def _stream_to_file(
    response: requests.Response,
    tmp_file,
    asset_name: str,
    progress_callback: Optional[ProgressCallback],
) -> int:
    """Copy the response body into tmp_file chunk by chunk."""
    total_size = _content_length(response)
    downloaded = 0

    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
        if not chunk:
            continue
        tmp_file.write(chunk)
        downloaded += len(chunk)
        if progress_callback:
            progress_callback(DownloadProgress(
                asset_name=asset_name,
                bytes_downloaded=downloaded,
                total_bytes=total_size,
            ))

    return downloaded


def _publish(
    response: requests.Response,
    dest_path: Path,
    progress_callback: Optional[ProgressCallback],
) -> None:
    """Write the response to a temp file and rename it onto dest_path."""
    parent = dest_path.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise WriteError(str(parent), e)

    cleanup_stale_temp_files(dest_path)

    try:
        fd, tmp_name = tempfile.mkstemp(dir=parent, prefix=dest_path.name + ".")
    except OSError as e:
        raise WriteError(str(dest_path), e)
    tmp_path = Path(tmp_name)

    try:
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                written = _stream_to_file(
                    response, tmp_file, dest_path.name, progress_callback
                )
        except (OSError, requests.exceptions.RequestException) as e:
            raise WriteError(str(tmp_path), e)

        try:
            os.replace(tmp_path, dest_path)
        except OSError as e:
            raise RenameError(str(tmp_path), str(dest_path), e)

        logger.info(f"Downloaded {written} bytes to {dest_path}")
    finally:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Failed to remove temp file {tmp_path}: {e}")


def download_file(
    client: GitHubClient,
    url: str,
    dest_path: Union[str, Path],
    progress_callback: Optional[ProgressCallback] = None,
) -> Path:
    """
    Download url to dest_path atomically.

    Args:
        client: GitHub client used to open the download
        url: Asset download URL
        dest_path: Destination file path
        progress_callback: Optional callback for progress updates

    Returns:
        Destination path

    Raises:
        ReleaseConnectionError: If unable to connect
        DownloadError: If the host answers with a non-200 status
        WriteError: If the temp file cannot be created or written
        RenameError: If the temp file cannot be renamed onto dest_path
    """
    dest_path = Path(dest_path)
    logger.info(f"Downloading {url} -> {dest_path}")

    response = client.open_download(url)
    try:
        _publish(response, dest_path, progress_callback)
    finally:
        response.close()

    return dest_path
