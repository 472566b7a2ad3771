"""Logging configuration for release sync.

Provides centralized logging with token redaction to ensure access tokens
are never written to log files.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional


# Token patterns to redact from logs
TOKEN_PATTERNS = [
    # Authorization headers
    (re.compile(r'(bearer\s+)[^\s,;\'"}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    (re.compile(r'(token\s+)(?=[A-Za-z0-9_]{20,})[^\s,;\'"}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    # token=... / "token": ... / access_token=...
    (re.compile(r'(token["\']?\s*[:=]\s*["\']?)[^\s&,;\'"}\]]+', re.IGNORECASE), r'\1[REDACTED]'),
    # GitHub token literals
    (re.compile(r'\bgh[pousr]_[A-Za-z0-9]{20,}'), '[REDACTED]'),
    (re.compile(r'\bgithub_pat_[A-Za-z0-9_]{20,}'), '[REDACTED]'),
]


def redact(message: str) -> str:
    """Redact access tokens from a message."""
    for pattern, replacement in TOKEN_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


class TokenRedactingFormatter(logging.Formatter):
    """Custom formatter that redacts access tokens from log messages."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, redacting any token."""
        return redact(super().format(record))


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configure application logging with token redaction.

    Args:
        level: Logging level (default INFO)
        log_file: Optional file path for log output
        console: Whether to output to console (default True)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("release_sync")
    logger.setLevel(level)

    # Clear any existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = TokenRedactingFormatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    # Console handler; stdout is reserved for command output
    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "release_sync") -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (default is app logger)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
