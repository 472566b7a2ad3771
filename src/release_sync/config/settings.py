"""Sync settings management for release sync.

Provides SyncSettings dataclass and SettingsManager for persistence.
"""

import json
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

from release_sync.config.paths import get_default_cache_path, get_settings_path
from release_sync.updater.github_client import GITHUB_API_BASE, REQUEST_TIMEOUT
from release_sync.utils.validators import (
    validate_api_base,
    validate_asset_name,
    validate_repo,
    validate_timeout,
)


@dataclass
class SyncSettings:
    """Settings describing what to sync and where."""

    # Release source
    repo: str = ""
    asset_name: str = ""

    # Local cache file; empty means the app cache directory
    cache_path: str = ""

    # API access
    api_base: str = GITHUB_API_BASE
    timeout: int = REQUEST_TIMEOUT

    # Logging
    log_level: str = "INFO"

    def to_dict(self) -> dict:
        """Convert settings to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SyncSettings":
        """Create settings from dictionary, ignoring unknown keys."""
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        return cls(**filtered)

    def resolved_cache_path(self) -> Path:
        """Cache file path, defaulting to the app cache directory."""
        if self.cache_path:
            return Path(self.cache_path).expanduser()
        return get_default_cache_path(self.asset_name)

    def validate(self) -> List[str]:
        """
        Validate the settings.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []
        for is_valid, error in (
            validate_repo(self.repo),
            validate_asset_name(self.asset_name),
            validate_api_base(self.api_base),
            validate_timeout(self.timeout),
        ):
            if not is_valid:
                errors.append(error)
        return errors


class SettingsManager:
    """Manages sync settings persistence."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            config_path: Optional custom path, defaults to platform standard
        """
        self._config_path = config_path or get_settings_path()

    @property
    def config_path(self) -> Path:
        """Path to settings file."""
        return self._config_path

    def load(self) -> SyncSettings:
        """
        Load settings from disk.

        Returns:
            SyncSettings instance (defaults if file not found)
        """
        if not self._config_path.exists():
            return SyncSettings()

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return SyncSettings.from_dict(data)
        except (json.JSONDecodeError, IOError, AttributeError, TypeError):
            # Invalid or unreadable file, use defaults
            return SyncSettings()

    def save(self, settings: SyncSettings) -> None:
        """
        Persist settings to disk.

        Args:
            settings: Settings to save
        """
        # Ensure parent directory exists
        self._config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self._config_path, "w", encoding="utf-8") as f:
            json.dump(settings.to_dict(), f, indent=2)
