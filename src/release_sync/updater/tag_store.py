"""Sidecar file recording the release tag of the cached asset.

The tag of the content at ``<cache_path>`` lives in ``<cache_path>.tag``.
"""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger("release_sync.tag_store")

TAG_SUFFIX = ".tag"

PathLike = Union[str, Path]


def tag_path(cache_path: PathLike) -> Path:
    """Path of the tag sidecar for a cache file (cache.mmdb -> cache.mmdb.tag)."""
    cache_path = Path(cache_path)
    return cache_path.with_name(cache_path.name + TAG_SUFFIX)


def read_stored_tag(cache_path: PathLike) -> str:
    """
    Read the tag of the cached content.

    Args:
        cache_path: Path of the cached asset

    Returns:
        Stored tag, or "" if the sidecar is missing or unreadable
    """
    try:
        return tag_path(cache_path).read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"No stored tag for {cache_path}: {e}")
        return ""


def write_stored_tag(cache_path: PathLike, tag: str) -> None:
    """
    Record the tag of freshly downloaded content.

    Args:
        cache_path: Path of the cached asset
        tag: Release tag of the content

    Raises:
        OSError: If the sidecar cannot be written
    """
    tag_path(cache_path).write_text(tag + "\n", encoding="utf-8")


def discard_stored_tag(cache_path: PathLike) -> bool:
    """
    Remove the tag sidecar.

    Returns:
        True if a sidecar was removed
    """
    try:
        tag_path(cache_path).unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        logger.warning(f"Failed to remove stale tag for {cache_path}: {e}")
        return False
    return True
