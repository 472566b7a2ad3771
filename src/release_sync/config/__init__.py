"""Configuration module for release sync.

This module handles sync settings and credentials:
- SettingsManager: JSON-based settings persistence
- CredentialManager: Secure access token storage via keyring
- Paths: Application data and cache directories
- SyncSettings: Settings dataclass
"""
