"""Release sync exceptions.

Custom exception hierarchy for release metadata lookups, asset downloads
and cache publishing, so callers can tell which stage of a sync failed.
"""

from typing import List, Optional


# Maximum number of response body bytes kept in an error message
MAX_ERROR_BODY = 512


class ReleaseSyncError(Exception):
    """Base exception for all release sync errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class InvalidRepoFormat(ReleaseSyncError):
    """Repository identifier is not of the form owner/name."""

    def __init__(self, repo: str):
        self.repo = repo
        message = f"Invalid repository {repo!r}: expected owner/repo"
        super().__init__(message)


class ReleaseConnectionError(ReleaseSyncError):
    """Unable to reach the releases API or the asset host."""

    def __init__(self, url: str, original_error: Optional[Exception] = None):
        self.url = url
        message = f"Request to {url} failed"
        super().__init__(message, original_error)


class RemoteAPIError(ReleaseSyncError):
    """Releases API answered with a non-success status."""

    def __init__(self, status_code: int, reason: str = "", body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        message = f"GitHub API {status_code} {reason}".rstrip()
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class ResponseDecodeError(ReleaseSyncError):
    """Release metadata response could not be decoded."""

    def __init__(self, original_error: Optional[Exception] = None):
        super().__init__("GitHub response decode failed", original_error)


class AssetNotFound(ReleaseSyncError):
    """Requested asset is not part of the latest release."""

    def __init__(self, asset_name: str, tag: str, available: List[str]):
        self.asset_name = asset_name
        self.tag = tag
        self.available = list(available)
        message = (
            f"Asset {asset_name!r} not found in release {tag} "
            f"(assets: {self.available})"
        )
        super().__init__(message)


class DownloadError(ReleaseSyncError):
    """Asset host answered with a non-success status."""

    def __init__(self, status_code: int, reason: str = "", body: str = ""):
        self.status_code = status_code
        self.reason = reason
        self.body = body
        message = f"Download {status_code} {reason}".rstrip()
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class WriteError(ReleaseSyncError):
    """Writing the downloaded asset to local storage failed."""

    def __init__(self, path: str, original_error: Optional[Exception] = None):
        self.path = path
        message = f"Failed to write '{path}'"
        super().__init__(message, original_error)


class RenameError(ReleaseSyncError):
    """Publishing the temporary download onto the cache path failed."""

    def __init__(self, src: str, dest: str, original_error: Optional[Exception] = None):
        self.src = src
        self.dest = dest
        message = f"Failed to rename '{src}' to '{dest}'"
        super().__init__(message, original_error)
