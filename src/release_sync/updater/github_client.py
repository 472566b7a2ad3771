"""GitHub API client for release metadata and asset downloads.

Looks up the latest release of a repository, resolves a named asset to its
download URL, and opens streaming downloads without leaking the access token
to hosts other than the API itself.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests

from release_sync.updater.exceptions import (
    MAX_ERROR_BODY,
    AssetNotFound,
    DownloadError,
    ReleaseConnectionError,
    RemoteAPIError,
    ResponseDecodeError,
)
from release_sync.utils.validators import parse_repo

logger = logging.getLogger("release_sync.github_client")


# GitHub API constants
GITHUB_API_BASE = "https://api.github.com"
GITHUB_MEDIA_TYPE = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "release-sync/1.0"

# Request timeout in seconds
REQUEST_TIMEOUT = 30


def _str_field(data: dict, key: str) -> str:
    """Get a string field; null or missing reads as ""."""
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


@dataclass
class ReleaseAsset:
    """Represents a downloadable asset from a GitHub release."""
    name: str
    download_url: str

    @classmethod
    def from_api_response(cls, data: dict) -> "ReleaseAsset":
        """
        Create ReleaseAsset from GitHub API response.

        Raises:
            TypeError: If name or browser_download_url is not a string
        """
        return cls(
            name=_str_field(data, "name"),
            download_url=_str_field(data, "browser_download_url"),
        )


@dataclass
class GitHubRelease:
    """Represents a GitHub release with its assets."""
    tag_name: str
    assets: List[ReleaseAsset] = field(default_factory=list)

    @property
    def asset_names(self) -> List[str]:
        """Names of all assets, in API order."""
        return [a.name for a in self.assets]

    def get_asset(self, name: str) -> Optional[ReleaseAsset]:
        """Get the first asset whose name matches exactly."""
        for asset in self.assets:
            if asset.name == name:
                return asset
        return None

    @classmethod
    def from_api_response(cls, data: dict) -> "GitHubRelease":
        """
        Create GitHubRelease from GitHub API response.

        Raises:
            TypeError: If a field the sync relies on has the wrong type
        """
        raw_assets = data.get("assets") or []
        if not isinstance(raw_assets, list):
            raise TypeError(f"'assets' must be a list, got {type(raw_assets).__name__}")

        assets = [
            ReleaseAsset.from_api_response(a)
            for a in raw_assets
            if isinstance(a, dict)
        ]

        return cls(
            tag_name=_str_field(data, "tag_name"),
            assets=assets,
        )


def _body_excerpt(response: requests.Response) -> str:
    """Read at most MAX_ERROR_BODY bytes of a streamed response body."""
    try:
        chunk = next(iter(response.iter_content(chunk_size=MAX_ERROR_BODY)), b"")
    except requests.exceptions.RequestException:
        return ""
    return chunk[:MAX_ERROR_BODY].decode("utf-8", errors="replace")


class GitHubClient:
    """Client for the GitHub releases API."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_base: str = GITHUB_API_BASE,
        timeout: int = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize GitHub client.

        Args:
            token: Optional access token; unauthenticated access is rate limited
            api_base: Base URL of the releases API
            timeout: Request timeout in seconds
            session: Optional HTTP session to use instead of a private one
        """
        self._token = token or None
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    @property
    def api_base(self) -> str:
        """Base URL of the releases API."""
        return self._api_base

    def _api_headers(self) -> dict:
        """Headers sent with every releases API request."""
        headers = {
            "Accept": GITHUB_MEDIA_TYPE,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _get(self, url: str, headers: dict) -> requests.Response:
        """Issue a streaming GET, mapping transport failures."""
        try:
            logger.debug(f"Making request to: {url}")
            return self._session.get(
                url,
                headers={"User-Agent": USER_AGENT, **headers},
                stream=True,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error("GitHub request timed out")
            raise ReleaseConnectionError(url, e)
        except requests.exceptions.RequestException as e:
            logger.error(f"GitHub request error: {e}")
            raise ReleaseConnectionError(url, e)

    def latest_release_url(self, repo: str) -> str:
        """
        Build the latest-release URL for a repository.

        Raises:
            InvalidRepoFormat: If repo is not owner/name
        """
        owner, name = parse_repo(repo)
        return f"{self._api_base}/repos/{owner}/{name}/releases/latest"

    def get_latest_release(self, repo: str) -> GitHubRelease:
        """
        Get the latest release of a repository.

        Args:
            repo: Repository identifier (owner/name)

        Returns:
            GitHubRelease representing the latest release

        Raises:
            InvalidRepoFormat: If repo is not owner/name
            ReleaseConnectionError: If unable to connect
            RemoteAPIError: If the API answers with a non-200 status
            ResponseDecodeError: If the response is not a release object
        """
        url = self.latest_release_url(repo)
        logger.info(f"Fetching latest release of {repo}")

        response = self._get(url, self._api_headers())
        try:
            if response.status_code != 200:
                raise RemoteAPIError(
                    response.status_code,
                    response.reason or "",
                    _body_excerpt(response),
                )
            try:
                data = response.json()
                if not isinstance(data, dict):
                    raise TypeError(f"expected a JSON object, got {type(data).__name__}")
                release = GitHubRelease.from_api_response(data)
            except (ValueError, TypeError) as e:
                raise ResponseDecodeError(e)
            except requests.exceptions.RequestException as e:
                raise ReleaseConnectionError(url, e)
        finally:
            response.close()

        logger.info(f"Found latest release: {release.tag_name}")
        return release

    def fetch_latest_release(self, repo: str, asset_name: str) -> Tuple[str, str]:
        """
        Resolve an asset of the latest release.

        Args:
            repo: Repository identifier (owner/name)
            asset_name: Exact (case-sensitive) asset file name

        Returns:
            Tuple of (tag, download_url)

        Raises:
            AssetNotFound: If no asset carries that name
            ReleaseSyncError: For any lookup failure of get_latest_release
        """
        release = self.get_latest_release(repo)
        asset = release.get_asset(asset_name)
        if asset is None:
            raise AssetNotFound(asset_name, release.tag_name, release.asset_names)
        return release.tag_name, asset.download_url

    def is_api_origin(self, url: str) -> bool:
        """True if url has the scheme, host and port of the API base."""
        target = urlparse(url)
        api = urlparse(self._api_base)
        if not target.hostname or not api.hostname:
            return False
        return (
            target.scheme.lower() == api.scheme.lower()
            and target.hostname.lower() == api.hostname.lower()
            and target.port == api.port
        )

    def should_authorize(self, url: str) -> bool:
        """True if the token may be sent to url (same origin as the API)."""
        return bool(self._token) and self.is_api_origin(url)

    def open_download(self, url: str) -> requests.Response:
        """
        Open a streaming download of an asset.

        Asset URLs may point at third-party storage with pre-signed links,
        so the bearer token is only attached for the API origin. For other
        origins an Authorization header set on the session is suppressed too.

        Args:
            url: Asset download URL

        Returns:
            Streaming response with a 200 status; the caller must close it

        Raises:
            ReleaseConnectionError: If unable to connect
            DownloadError: If the host answers with a non-200 status
        """
        headers = {}
        if self.should_authorize(url):
            headers["Authorization"] = f"Bearer {self._token}"
        elif not self.is_api_origin(url):
            # requests drops merged session headers whose value is None
            headers["Authorization"] = None

        response = self._get(url, headers)
        if response.status_code != 200:
            try:
                raise DownloadError(
                    response.status_code,
                    response.reason or "",
                    _body_excerpt(response),
                )
            finally:
                response.close()
        return response

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "GitHubClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
