"""In-memory TTL cache for repository statistics snapshots.

Entries expire lazily: a stale entry is evicted by the lookup that finds
it, there is no background sweep.  The cache is unbounded; the key space is
limited to the repositories users actually open.  Concurrent misses on the
same key may both compute a snapshot, and the last ``set`` wins.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

from repo_dashboard.domain.entities import CacheEntry

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 3600.0


class TTLCache:
    """Thread-safe key → value store with a fixed time-to-live.

    Parameters
    ----------
    ttl_seconds:
        Maximum age of an entry.  An entry aged exactly *ttl_seconds* is
        still served.
    clock:
        Returns the current time in seconds; injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.ttl_seconds = ttl_seconds

    def get(self, key: str) -> Any | None:
        """Return the value for *key*, or ``None`` when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("Cache miss for %s", key)
                return None
            if not entry.is_fresh(self._clock(), self.ttl_seconds):
                del self._entries[key]
                logger.debug("Cache entry for %s expired", key)
                return None
            logger.debug("Cache hit for %s", key)
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Insert or overwrite *key*, stamping it with the current time."""
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())

    def invalidate(self, key: str) -> None:
        """Drop *key* if present."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        # Counts stored entries, including ones that expired but were not looked up yet.
        with self._lock:
            return len(self._entries)
