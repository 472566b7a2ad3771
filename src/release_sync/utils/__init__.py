"""Utility module for release sync.

This module provides cross-cutting utilities:
- Logging: Configured logging with access token redaction
- Validators: Repository parsing and settings validation
- Threading: Per-cache-path serialization of syncs
"""
