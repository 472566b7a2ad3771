"""Secure access token storage for release sync.

Uses the system keyring (Windows Credential Manager, macOS Keychain,
Linux Secret Service) to store GitHub access tokens per repository.
"""

import os
from typing import Optional

import keyring
from keyring.errors import KeyringError

# Environment variable consulted before the keyring
TOKEN_ENV_VAR = "GITHUB_TOKEN"


class CredentialManager:
    """Secure access token storage using system keyring."""

    SERVICE_NAME = "release-sync"

    def _make_key(self, repo: str) -> str:
        """
        Create a unique key for the token.

        Args:
            repo: Repository identifier (owner/name)

        Returns:
            Unique key string
        """
        return f"github:{repo.strip().rstrip('/').lower()}"

    def save_token(self, repo: str, token: str) -> bool:
        """
        Save an access token securely.

        Args:
            repo: Repository identifier
            token: Token to save

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            keyring.set_password(self.SERVICE_NAME, self._make_key(repo), token)
            return True
        except KeyringError:
            return False

    def get_token(self, repo: str) -> Optional[str]:
        """
        Retrieve a saved token.

        Args:
            repo: Repository identifier

        Returns:
            Token string or None if not found
        """
        try:
            return keyring.get_password(self.SERVICE_NAME, self._make_key(repo))
        except KeyringError:
            return None

    def delete_token(self, repo: str) -> bool:
        """
        Remove a saved token.

        Args:
            repo: Repository identifier

        Returns:
            True if deleted successfully, False otherwise
        """
        try:
            keyring.delete_password(self.SERVICE_NAME, self._make_key(repo))
            return True
        except KeyringError:
            return False

    def has_token(self, repo: str) -> bool:
        """
        Check if a token is saved.

        Args:
            repo: Repository identifier

        Returns:
            True if token exists
        """
        return self.get_token(repo) is not None

    def resolve_token(self, repo: str, explicit: Optional[str] = None) -> Optional[str]:
        """
        Pick the token for a sync.

        Order: explicit value, GITHUB_TOKEN environment variable, keyring.

        Args:
            repo: Repository identifier
            explicit: Token given on the command line, if any

        Returns:
            Token string or None for unauthenticated access
        """
        if explicit:
            return explicit
        env_token = os.environ.get(TOKEN_ENV_VAR)
        if env_token:
            return env_token
        return self.get_token(repo)
