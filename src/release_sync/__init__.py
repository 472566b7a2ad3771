"""Keep a local file in step with the latest asset of a GitHub release."""

from .updater import (
    ReleaseSync,
    SyncResult,
    sync_release,
)

__version__ = "1.0.0"

__all__ = [
    "ReleaseSync",
    "SyncResult",
    "sync_release",
    "__version__",
]
