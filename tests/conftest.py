"""Pytest configuration and shared fixtures for release sync tests."""

import copy
from pathlib import Path
from typing import Callable
from unittest.mock import MagicMock

import pytest

from tests.helpers import SAMPLE_RELEASE_RESPONSE, TEST_ASSET, make_response


@pytest.fixture
def release_response() -> dict:
    """Provide a fresh copy of the sample latest-release payload."""
    return copy.deepcopy(SAMPLE_RELEASE_RESPONSE)


@pytest.fixture
def response_factory() -> Callable[..., MagicMock]:
    """Provide the mock response builder."""
    return make_response


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Provide an empty cache directory."""
    directory = tmp_path / "cache"
    directory.mkdir()
    return directory


@pytest.fixture
def cache_path(cache_dir: Path) -> Path:
    """Provide the cache file path (not created)."""
    return cache_dir / TEST_ASSET


@pytest.fixture(autouse=True)
def no_github_token(monkeypatch):
    """Keep a developer's GITHUB_TOKEN out of the tests."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
