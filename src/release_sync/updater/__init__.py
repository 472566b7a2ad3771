"""Updater module for GitHub release sync.

This module keeps a cached asset in step with the latest release:
- GitHubClient: release metadata lookup and scoped asset downloads
- download_file: atomic temp-file-plus-rename downloads
- Tag store: sidecar file recording the cached release tag
- ReleaseSync / sync_release: the "ensure cache is current" operation
"""

from .exceptions import (
    ReleaseSyncError,
    InvalidRepoFormat,
    ReleaseConnectionError,
    RemoteAPIError,
    ResponseDecodeError,
    AssetNotFound,
    DownloadError,
    WriteError,
    RenameError,
)
from .github_client import (
    GitHubClient,
    GitHubRelease,
    ReleaseAsset,
)
from .downloader import (
    download_file,
    cleanup_stale_temp_files,
    DownloadProgress,
    ProgressCallback,
)
from .tag_store import (
    tag_path,
    read_stored_tag,
    write_stored_tag,
    discard_stored_tag,
)
from .sync import ReleaseSync, SyncResult, sync_release

__all__ = [
    # Errors
    "ReleaseSyncError",
    "InvalidRepoFormat",
    "ReleaseConnectionError",
    "RemoteAPIError",
    "ResponseDecodeError",
    "AssetNotFound",
    "DownloadError",
    "WriteError",
    "RenameError",
    # GitHub client
    "GitHubClient",
    "GitHubRelease",
    "ReleaseAsset",
    # Downloader
    "download_file",
    "cleanup_stale_temp_files",
    "DownloadProgress",
    "ProgressCallback",
    # Tag store
    "tag_path",
    "read_stored_tag",
    "write_stored_tag",
    "discard_stored_tag",
    # Sync
    "ReleaseSync",
    "SyncResult",
    "sync_release",
]
