"""Path constants and discovery for release sync.

Defines the application data directories and the default cache location.
"""

import os
import sys
from pathlib import Path


# Application name for config directories
APP_NAME = "release-sync"


def get_app_data_dir() -> Path:
    """
    Get the application data directory.

    Returns:
        Path to app data directory (created if not exists)

    Platform-specific locations:
        - Windows: %APPDATA%/release-sync
        - Linux: ~/.config/release-sync
        - macOS: ~/Library/Application Support/release-sync
    """
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    app_dir = base / APP_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_settings_path() -> Path:
    """
    Get the path to the settings JSON file.

    Returns:
        Path to settings.json
    """
    return get_app_data_dir() / "settings.json"


def get_cache_dir() -> Path:
    """
    Get the cache directory for downloaded assets.

    Returns:
        Path to cache directory (created if not exists)
    """
    cache_dir = get_app_data_dir() / "cache"
    cache_dir.mkdir(parents=True, exist_ok=True)
    return cache_dir


def get_default_cache_path(asset_name: str) -> Path:
    """
    Get the default cache file for an asset.

    Args:
        asset_name: Release asset file name

    Returns:
        Path inside the cache directory named after the asset
    """
    return get_cache_dir() / asset_name
