"""Command-line entry point for release sync.

Loads settings, wires up logging, credentials and the GitHub client,
and runs one of the sync commands.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config.credentials import CredentialManager
from .config.settings import SettingsManager, SyncSettings
from .updater.downloader import cleanup_stale_temp_files
from .updater.exceptions import ReleaseSyncError
from .updater.github_client import GitHubClient
from .updater.sync import ReleaseSync
from .updater.tag_store import read_stored_tag
from .utils.logging import setup_logging


EXIT_OK = 0
EXIT_SYNC_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="release-sync",
        description="Keep a local file in step with the latest GitHub release asset.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Settings JSON file (default: platform config directory)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    target = argparse.ArgumentParser(add_help=False)
    target.add_argument("--repo", help="Repository as owner/name")
    target.add_argument("--asset", dest="asset_name", help="Release asset file name")
    target.add_argument("--cache", dest="cache_path", help="Local cache file path")

    sync = commands.add_parser("sync", parents=[target], help="Download the asset if a newer release exists")
    sync.add_argument("--api-base", help="Releases API base URL")
    sync.add_argument("--token", help="Access token (default: $GITHUB_TOKEN, then keyring)")
    sync.add_argument("--timeout", type=int, help="Request timeout in seconds")
    sync.add_argument("--save", action="store_true", help="Save the given options as defaults")

    commands.add_parser("status", parents=[target], help="Show the cached file and its tag")
    commands.add_parser("cleanup", parents=[target], help="Remove temp files left by interrupted downloads")

    token = commands.add_parser("token", help="Manage stored access tokens")
    token_commands = token.add_subparsers(dest="token_command", required=True)
    token_set = token_commands.add_parser("set", help="Store a token in the keyring")
    token_set.add_argument("repo")
    token_set.add_argument("token")
    token_clear = token_commands.add_parser("clear", help="Remove a stored token")
    token_clear.add_argument("repo")

    return parser


class Application:
    """
    Command-line application controller.

    Merges saved settings with command-line options and dispatches
    to the requested command.
    """

    def __init__(
        self,
        args: argparse.Namespace,
        settings_manager: Optional[SettingsManager] = None,
        credential_manager: Optional[CredentialManager] = None,
    ):
        """
        Initialize the application.

        Args:
            args: Parsed command-line arguments
            settings_manager: Optional settings manager (default: platform path)
            credential_manager: Optional credential manager
        """
        self._args = args
        self._settings_manager = settings_manager or SettingsManager(args.settings)
        self._credential_manager = credential_manager or CredentialManager()
        self._settings = self._merge_settings(self._settings_manager.load())

        level = logging.DEBUG if args.verbose else getattr(
            logging, str(self._settings.log_level).upper(), logging.INFO
        )
        self._logger = setup_logging(level=level, log_file=args.log_file)

    @property
    def settings(self) -> SyncSettings:
        """Effective settings (saved settings overridden by options)."""
        return self._settings

    def _merge_settings(self, saved: SyncSettings) -> SyncSettings:
        """Apply command-line options on top of saved settings."""
        overrides = {}
        for name in ("repo", "asset_name", "cache_path", "api_base", "timeout"):
            value = getattr(self._args, name, None)
            if value is not None:
                overrides[name] = value
        return replace(saved, **overrides)

    def _check_settings(self) -> bool:
        """Log configuration errors, return True if settings are usable."""
        errors = self._settings.validate()
        for error in errors:
            self._logger.error(f"Invalid configuration: {error}")
        return not errors

    def run(self) -> int:
        """
        Run the requested command.

        Returns:
            Exit code
        """
        command = self._args.command
        if command == "token":
            return self.run_token()
        if command == "sync":
            if not self._check_settings():
                return EXIT_USAGE
            return self.run_sync()
        if not (self._settings.cache_path or self._settings.asset_name):
            self._logger.error("Invalid configuration: cache path or asset name is required")
            return EXIT_USAGE
        if command == "status":
            return self.run_status()
        if command == "cleanup":
            return self.run_cleanup()
        return EXIT_USAGE

    def run_sync(self) -> int:
        """Sync the configured asset."""
        settings = self._settings
        cache_path = settings.resolved_cache_path()
        token = self._credential_manager.resolve_token(
            settings.repo, getattr(self._args, "token", None)
        )

        if getattr(self._args, "save", False):
            self._settings_manager.save(settings)
            self._logger.info(f"Saved settings to {self._settings_manager.config_path}")

        with GitHubClient(
            token=token,
            api_base=settings.api_base,
            timeout=settings.timeout,
        ) as client:
            try:
                result = ReleaseSync(client).sync(
                    settings.repo, settings.asset_name, cache_path
                )
            except ReleaseSyncError as e:
                self._logger.error(f"Sync of {settings.repo} failed: {e}")
                return EXIT_SYNC_FAILED

        if result.has_warning:
            self._logger.warning(
                f"Content updated but tag not stored: {result.tag_write_error}"
            )
        state = "updated" if result.updated else "up to date"
        print(f"{result.tag} ({state})")
        return EXIT_OK

    def run_status(self) -> int:
        """Print the cached file and its stored tag."""
        cache_path = self._settings.resolved_cache_path()
        exists = cache_path.exists()
        tag = read_stored_tag(cache_path) if exists else ""
        print(f"cache: {cache_path}")
        print(f"exists: {'yes' if exists else 'no'}")
        print(f"tag: {tag or '-'}")
        return EXIT_OK

    def run_cleanup(self) -> int:
        """Remove stale temp files next to the cache file."""
        removed = cleanup_stale_temp_files(self._settings.resolved_cache_path())
        print(f"removed {removed} stale file(s)")
        return EXIT_OK

    def run_token(self) -> int:
        """Store or clear a keyring token."""
        repo = self._args.repo
        if self._args.token_command == "set":
            if not self._credential_manager.save_token(repo, self._args.token):
                self._logger.error(f"Could not store token for {repo}")
                return EXIT_SYNC_FAILED
            self._logger.info(f"Stored token for {repo}")
        else:
            if not self._credential_manager.delete_token(repo):
                self._logger.error(f"No stored token for {repo}")
                return EXIT_SYNC_FAILED
            self._logger.info(f"Cleared token for {repo}")
        return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application entry point.

    Returns:
        Exit code (0 for success)
    """
    args = build_parser().parse_args(argv)
    try:
        return Application(args).run()
    except OSError as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return EXIT_SYNC_FAILED


if __name__ == "__main__":
    sys.exit(main())
