"""Unit tests for GitHubClient.

Tests release metadata lookup, asset resolution and download scoping.
"""

import pytest
import requests
from unittest.mock import MagicMock, patch

from release_sync.updater.exceptions import (
    MAX_ERROR_BODY,
    AssetNotFound,
    DownloadError,
    InvalidRepoFormat,
    ReleaseConnectionError,
    RemoteAPIError,
    ResponseDecodeError,
)
from release_sync.updater.github_client import (
    GITHUB_API_VERSION,
    GITHUB_MEDIA_TYPE,
    GitHubClient,
    GitHubRelease,
    ReleaseAsset,
)
from tests.helpers import SAMPLE_RELEASE_RESPONSE, TEST_ASSET, TEST_REPO


LATEST_URL = "https://api.github.com/repos/owner/repo/releases/latest"


class TestReleaseAsset:
    """Tests for ReleaseAsset dataclass."""

    def test_from_api_response(self):
        """Test creating ReleaseAsset from API response."""
        asset = ReleaseAsset.from_api_response({
            "name": "data.db",
            "browser_download_url": "https://example.com/data.db",
            "size": 1024,
        })

        assert asset.name == "data.db"
        assert asset.download_url == "https://example.com/data.db"

    def test_from_api_response_missing_fields(self):
        """Test creating ReleaseAsset with missing fields."""
        asset = ReleaseAsset.from_api_response({"name": None})

        assert asset.name == ""
        assert asset.download_url == ""

    @pytest.mark.parametrize("data", [
        {"name": 7, "browser_download_url": "https://example.com/data.db"},
        {"name": "data.db", "browser_download_url": ["https://example.com/data.db"]},
    ])
    def test_from_api_response_wrong_types(self, data):
        """Test non-string name or URL is rejected."""
        with pytest.raises(TypeError):
            ReleaseAsset.from_api_response(data)


class TestGitHubRelease:
    """Tests for GitHubRelease dataclass."""

    def test_from_api_response(self):
        """Test creating GitHubRelease from API response."""
        release = GitHubRelease.from_api_response(SAMPLE_RELEASE_RESPONSE)

        assert release.tag_name == "v1"
        assert release.asset_names == ["checksums.txt", "data.db"]

    @pytest.mark.parametrize("tag_name", [5, 1.5, ["v1"], {"v": 1}, True])
    def test_tag_name_must_be_string(self, tag_name):
        """Test a non-string tag is rejected."""
        data = dict(SAMPLE_RELEASE_RESPONSE, tag_name=tag_name)
        with pytest.raises(TypeError):
            GitHubRelease.from_api_response(data)

    def test_get_asset_exact_match(self):
        """Test get_asset is exact and case-sensitive."""
        release = GitHubRelease.from_api_response(SAMPLE_RELEASE_RESPONSE)

        assert release.get_asset("data.db").name == "data.db"
        assert release.get_asset("DATA.DB") is None
        assert release.get_asset("data") is None

    def test_get_asset_first_match_wins(self):
        """Test the first asset with a matching name is returned."""
        release = GitHubRelease(
            tag_name="v2",
            assets=[
                ReleaseAsset("data.db", "https://example.com/first"),
                ReleaseAsset("data.db", "https://example.com/second"),
            ],
        )
        assert release.get_asset("data.db").download_url == "https://example.com/first"

    def test_no_assets(self):
        """Test a release without assets."""
        release = GitHubRelease.from_api_response({"tag_name": "v1", "assets": None})
        assert release.assets == []

    def test_assets_not_a_list(self):
        """Test that a malformed assets field is rejected."""
        with pytest.raises(TypeError):
            GitHubRelease.from_api_response({"tag_name": "v1", "assets": "data.db"})


class TestGitHubClient:
    """Tests for GitHubClient."""

    @pytest.fixture
    def session(self):
        """Create a mock HTTP session."""
        return MagicMock(spec=requests.Session)

    @pytest.fixture
    def client(self, session):
        """Create a GitHubClient using the mock session."""
        return GitHubClient(timeout=10, session=session)

    def test_latest_release_url(self, client):
        """Test the latest-release URL layout."""
        assert client.latest_release_url("owner/repo/") == LATEST_URL

    def test_latest_release_url_custom_base(self, session):
        """Test a custom API base, trailing slash ignored."""
        client = GitHubClient(api_base="http://127.0.0.1:8080/", session=session)
        assert (
            client.latest_release_url("a/b")
            == "http://127.0.0.1:8080/repos/a/b/releases/latest"
        )

    def test_invalid_repo_makes_no_request(self, client, session):
        """Test that a bad repo fails before any network I/O."""
        with pytest.raises(InvalidRepoFormat):
            client.get_latest_release("just-a-name")
        session.get.assert_not_called()

    def test_get_latest_release_success(self, client, session, response_factory):
        """Test successful get_latest_release."""
        response = response_factory(json_data=SAMPLE_RELEASE_RESPONSE)
        session.get.return_value = response

        release = client.get_latest_release(TEST_REPO)

        assert release.tag_name == "v1"
        assert len(release.assets) == 2
        response.close.assert_called_once()

    def test_api_headers_without_token(self, client, session, response_factory):
        """Test protocol headers are sent and no Authorization without a token."""
        session.get.return_value = response_factory(json_data=SAMPLE_RELEASE_RESPONSE)

        client.get_latest_release(TEST_REPO)

        args, kwargs = session.get.call_args
        assert args[0] == LATEST_URL
        headers = kwargs["headers"]
        assert headers["Accept"] == GITHUB_MEDIA_TYPE
        assert headers["X-GitHub-Api-Version"] == GITHUB_API_VERSION
        assert "Authorization" not in headers
        assert kwargs["timeout"] == 10
        assert kwargs["stream"] is True

    def test_api_headers_with_token(self, session, response_factory):
        """Test the bearer token is sent to the API."""
        client = GitHubClient(token="secret", session=session)
        session.get.return_value = response_factory(json_data=SAMPLE_RELEASE_RESPONSE)

        client.get_latest_release(TEST_REPO)

        headers = session.get.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer secret"

    def test_get_latest_release_not_found(self, client, session, response_factory):
        """Test a non-200 status raises RemoteAPIError."""
        session.get.return_value = response_factory(
            status_code=404, reason="Not Found", chunks=[b'{"message": "Not Found"}']
        )

        with pytest.raises(RemoteAPIError) as exc_info:
            client.get_latest_release(TEST_REPO)

        assert exc_info.value.status_code == 404
        assert exc_info.value.body == '{"message": "Not Found"}'
        assert "404 Not Found" in str(exc_info.value)

    def test_error_body_is_truncated(self, client, session, response_factory):
        """Test only a bounded excerpt of the error body is kept."""
        response = response_factory(
            status_code=500, reason="Server Error", chunks=[b"x" * 4096]
        )
        session.get.return_value = response

        with pytest.raises(RemoteAPIError) as exc_info:
            client.get_latest_release(TEST_REPO)

        assert len(exc_info.value.body) == MAX_ERROR_BODY
        response.iter_content.assert_called_once_with(chunk_size=MAX_ERROR_BODY)
        response.close.assert_called_once()

    def test_get_latest_release_rate_limited(self, client, session, response_factory):
        """Test a rate limit answer carries status and message."""
        session.get.return_value = response_factory(
            status_code=403,
            reason="Forbidden",
            chunks=[b"API rate limit exceeded"],
        )

        with pytest.raises(RemoteAPIError) as exc_info:
            client.get_latest_release(TEST_REPO)

        assert exc_info.value.status_code == 403
        assert "rate limit" in str(exc_info.value)

    def test_malformed_json(self, client, session, response_factory):
        """Test a body that is not JSON raises ResponseDecodeError."""
        response = response_factory()
        response.json.side_effect = ValueError("Expecting value")
        session.get.return_value = response

        with pytest.raises(ResponseDecodeError):
            client.get_latest_release(TEST_REPO)

    def test_json_not_an_object(self, client, session, response_factory):
        """Test a JSON array raises ResponseDecodeError."""
        session.get.return_value = response_factory(json_data=[SAMPLE_RELEASE_RESPONSE])

        with pytest.raises(ResponseDecodeError):
            client.get_latest_release(TEST_REPO)

    def test_non_string_tag_is_decode_error(self, client, session, response_factory):
        """Test a numeric tag_name fails before any asset is resolved."""
        payload = dict(SAMPLE_RELEASE_RESPONSE, tag_name=5)
        session.get.return_value = response_factory(json_data=payload)

        with pytest.raises(ResponseDecodeError):
            client.fetch_latest_release(TEST_REPO, TEST_ASSET)
        assert session.get.call_count == 1

    def test_connection_error(self, client, session):
        """Test a transport failure raises ReleaseConnectionError."""
        session.get.side_effect = requests.exceptions.ConnectionError("Network error")

        with pytest.raises(ReleaseConnectionError) as exc_info:
            client.get_latest_release(TEST_REPO)

        assert exc_info.value.url == LATEST_URL
        assert "Network error" in str(exc_info.value)

    def test_timeout(self, client, session):
        """Test a timeout raises ReleaseConnectionError."""
        session.get.side_effect = requests.exceptions.Timeout("Request timed out")

        with pytest.raises(ReleaseConnectionError):
            client.get_latest_release(TEST_REPO)

    def test_fetch_latest_release(self, client, session, response_factory):
        """Test resolving the tag and download URL of an asset."""
        session.get.return_value = response_factory(json_data=SAMPLE_RELEASE_RESPONSE)

        tag, url = client.fetch_latest_release(TEST_REPO, TEST_ASSET)

        assert tag == "v1"
        assert url == "https://github.com/owner/repo/releases/download/v1/data.db"

    def test_fetch_latest_release_asset_not_found(self, client, session, response_factory):
        """Test a missing asset lists the names that are present."""
        session.get.return_value = response_factory(json_data=SAMPLE_RELEASE_RESPONSE)

        with pytest.raises(AssetNotFound) as exc_info:
            client.fetch_latest_release(TEST_REPO, "missing.db")

        error = exc_info.value
        assert error.tag == "v1"
        assert error.available == ["checksums.txt", "data.db"]
        assert "'missing.db'" in str(error)
        assert "checksums.txt" in str(error)
        assert "v1" in str(error)


class TestDownloadScoping:
    """Tests for token scoping on asset downloads."""

    @pytest.fixture
    def session(self):
        return MagicMock(spec=requests.Session)

    @pytest.mark.parametrize("url, expected", [
        ("https://api.github.com/repos/o/r/releases/assets/1", True),
        ("https://API.GITHUB.COM/repos/o/r/releases/assets/1", True),
        ("https://github.com/o/r/releases/download/v1/data.db", False),
        ("https://objects.githubusercontent.com/some/path?sig=abc", False),
        ("https://api.github.com.evil.example/steal", False),
        ("https://evil.example/?u=api.github.com", False),
        ("https://api.github.com:8443/x", False),
        ("http://api.github.com/repos/o/r/releases/assets/1", False),
    ])
    def test_should_authorize(self, session, url, expected):
        """Test the token only goes to the API host."""
        client = GitHubClient(token="secret", session=session)
        assert client.should_authorize(url) is expected

    def test_should_authorize_without_token(self, session):
        """Test no authorization without a token."""
        client = GitHubClient(session=session)
        assert client.should_authorize("https://api.github.com/x") is False

    def test_open_download_api_host(self, session, response_factory):
        """Test downloads from the API host carry the token."""
        client = GitHubClient(token="secret", session=session)
        response = response_factory(chunks=[b"data"])
        session.get.return_value = response

        result = client.open_download("https://api.github.com/repos/o/r/releases/assets/1")

        assert result is response
        headers = session.get.call_args.kwargs["headers"]
        assert headers["Authorization"] == "Bearer secret"
        response.close.assert_not_called()

    def test_open_download_other_host(self, session, response_factory):
        """Test downloads from storage hosts never carry the token."""
        client = GitHubClient(token="secret", session=session)
        session.get.return_value = response_factory(chunks=[b"data"])

        client.open_download("https://github.com/o/r/releases/download/v1/data.db")

        kwargs = session.get.call_args.kwargs
        assert kwargs["headers"]["Authorization"] is None
        assert kwargs["stream"] is True

    def test_open_download_suppresses_session_authorization(self, response_factory):
        """Test a session-level Authorization header is not sent to storage hosts."""
        session = requests.Session()
        session.headers["Authorization"] = "Bearer session-token"
        client = GitHubClient(session=session)

        with patch.object(requests.Session, "send") as send:
            send.return_value = response_factory(chunks=[b"data"])
            client.open_download("https://github.com/o/r/releases/download/v1/data.db")

        prepared = send.call_args.args[0]
        assert "Authorization" not in prepared.headers

    def test_open_download_keeps_session_authorization_for_api(self, response_factory):
        """Test a session-level Authorization header still reaches the API origin."""
        session = requests.Session()
        session.headers["Authorization"] = "Bearer session-token"
        client = GitHubClient(session=session)

        with patch.object(requests.Session, "send") as send:
            send.return_value = response_factory(chunks=[b"data"])
            client.open_download("https://api.github.com/repos/o/r/releases/assets/1")

        prepared = send.call_args.args[0]
        assert prepared.headers["Authorization"] == "Bearer session-token"

    def test_open_download_error_status(self, session, response_factory):
        """Test a non-200 download raises DownloadError with a bounded body."""
        client = GitHubClient(session=session)
        response = response_factory(
            status_code=404, reason="Not Found", chunks=[b"y" * 2000]
        )
        session.get.return_value = response

        with pytest.raises(DownloadError) as exc_info:
            client.open_download("https://github.com/o/r/releases/download/v1/data.db")

        assert exc_info.value.status_code == 404
        assert len(exc_info.value.body) == MAX_ERROR_BODY
        response.close.assert_called_once()

    def test_open_download_connection_error(self, session):
        """Test a transport failure raises ReleaseConnectionError."""
        client = GitHubClient(session=session)
        session.get.side_effect = requests.exceptions.ConnectionError("reset")

        with pytest.raises(ReleaseConnectionError):
            client.open_download("https://github.com/o/r/releases/download/v1/data.db")


class TestClientLifecycle:
    """Tests for session ownership."""

    def test_injected_session_left_open(self):
        """Test close() leaves a caller's session open."""
        session = MagicMock(spec=requests.Session)
        with GitHubClient(session=session):
            pass
        session.close.assert_not_called()

    def test_own_session_closed(self):
        """Test close() closes the client's own session."""
        with patch("release_sync.updater.github_client.requests.Session") as session_cls:
            with GitHubClient():
                pass
        session_cls.return_value.close.assert_called_once()
