"""Input validators for release sync.

Provides the repository identifier parser and validation functions for
the settings that drive a sync: repository, asset name, API base and timeout.
"""

from typing import Optional, Tuple
from urllib.parse import urlparse

from release_sync.updater.exceptions import InvalidRepoFormat


REPO_SEPARATOR = "/"


def parse_repo(repo: str) -> Tuple[str, str]:
    """
    Split a repository identifier into owner and name.

    One trailing separator is tolerated ("owner/name/"). The identifier is
    split on the first separator only, so anything after it is the name.

    Args:
        repo: Repository identifier of the form owner/name

    Returns:
        Tuple of (owner, name)

    Raises:
        InvalidRepoFormat: If owner or name is missing
    """
    trimmed = repo[:-1] if repo.endswith(REPO_SEPARATOR) else repo
    parts = trimmed.split(REPO_SEPARATOR, 1)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise InvalidRepoFormat(repo)
    return parts[0], parts[1]


def validate_repo(repo: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a repository identifier.

    Args:
        repo: Repository identifier to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not repo or not repo.strip():
        return False, "Repository is required"

    try:
        parse_repo(repo.strip())
    except InvalidRepoFormat as e:
        return False, str(e)

    return True, None


def validate_asset_name(name: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a release asset file name.

    Args:
        name: Asset name to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not name or not name.strip():
        return False, "Asset name is required"

    if "/" in name or "\\" in name:
        return False, f"Asset name cannot contain path separators: {name}"

    return True, None


def validate_api_base(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate the releases API base URL.

    Args:
        url: Base URL such as https://api.github.com

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not url.strip():
        return False, "API base URL is required"

    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https"):
        return False, f"API base URL must use http or https: {url}"
    if not parsed.hostname:
        return False, f"API base URL has no host: {url}"

    return True, None


def validate_timeout(timeout: int) -> Tuple[bool, Optional[str]]:
    """
    Validate a timeout value in seconds.

    Args:
        timeout: Timeout in seconds

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(timeout, int):
        try:
            timeout = int(timeout)
        except (ValueError, TypeError):
            return False, "Timeout must be a number"

    if timeout < 1 or timeout > 600:
        return False, f"Timeout must be between 1 and 600 seconds, got {timeout}"

    return True, None
