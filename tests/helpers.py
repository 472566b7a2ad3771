"""Shared constants and mock builders for release sync tests."""

from typing import Iterable, Optional
from unittest.mock import MagicMock


TEST_REPO = "owner/repo"
TEST_ASSET = "data.db"
TEST_TAG = "v1"
TEST_API_BASE = "https://api.github.com"

SAMPLE_RELEASE_RESPONSE = {
    "tag_name": TEST_TAG,
    "name": "Release v1",
    "assets": [
        {
            "name": "checksums.txt",
            "browser_download_url": "https://github.com/owner/repo/releases/download/v1/checksums.txt",
            "size": 64,
        },
        {
            "name": TEST_ASSET,
            "browser_download_url": "https://github.com/owner/repo/releases/download/v1/data.db",
            "size": 11,
        },
    ],
}


def make_response(
    status_code: int = 200,
    json_data=None,
    chunks: Optional[Iterable] = None,
    reason: str = "OK",
    headers: Optional[dict] = None,
) -> MagicMock:
    """
    Build a mock requests.Response.

    Items of chunks that are exceptions are raised while iterating,
    to simulate a connection dropping mid-stream.
    """
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.headers = headers or {}
    response.json.return_value = json_data
    body = list(chunks) if chunks is not None else []

    def iter_content(chunk_size=1, decode_unicode=False):
        for item in body:
            if isinstance(item, BaseException):
                raise item
            yield item

    response.iter_content = MagicMock(side_effect=iter_content)
    return response
