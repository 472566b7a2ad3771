"""Thread helpers for release sync.

The sync itself takes no locks. Callers that run syncs from several worker
threads can wrap it in SerializedReleaseSync so that syncs of the same cache
path run one at a time.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Hashable, Iterator, Optional, Union

from release_sync.updater.sync import ReleaseSync, SyncResult


class _Entry:
    """A lock and the number of threads holding or waiting for it."""

    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class KeyedLock:
    """
    Registry of one lock per key.

    A key is registered only while some thread holds or waits for its
    lock, so the registry stays as small as the number of busy keys.

    Usage:
        locks = KeyedLock()
        with locks.hold("/var/cache/geo.mmdb"):
            ...
    """

    def __init__(self):
        """Initialize an empty lock registry."""
        self._guard = threading.Lock()
        self._entries: Dict[Hashable, _Entry] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """Hold the lock for key for the duration of the block."""
        with self._guard:
            entry = self._entries.get(key)
            if entry is None:
                entry = _Entry()
                self._entries[key] = entry
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[key]

    def is_held(self, key: Hashable) -> bool:
        """True if some thread currently holds the lock for key."""
        with self._guard:
            entry = self._entries.get(key)
            return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)


class SerializedReleaseSync:
    """Runs ReleaseSync.sync one at a time per cache path."""

    def __init__(self, sync: ReleaseSync, locks: Optional[KeyedLock] = None):
        """
        Initialize the wrapper.

        Args:
            sync: Sync to serialize
            locks: Optional lock registry shared with other wrappers
        """
        self._sync = sync
        self._locks = locks if locks is not None else KeyedLock()

    def sync(
        self,
        repo: str,
        asset_name: str,
        cache_path: Union[str, Path],
    ) -> SyncResult:
        """Same as ReleaseSync.sync, serialized on the resolved cache path."""
        key = Path(cache_path).resolve()
        with self._locks.hold(key):
            return self._sync.sync(repo, asset_name, cache_path)
