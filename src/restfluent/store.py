"""Counter stores for rate limiting.

The rate limiter talks to a store through two calls, ``get`` and
``set``. Either may be sync or async, so a Redis or memcached client
can be dropped in with a thin adapter. No transactional guarantee is
expected: concurrent requests may read the same count and both write
``count + 1``, which lets a burst slightly overshoot the ceiling.
"""

import threading
import time
from collections.abc import Callable
from typing import Any, Protocol


class CounterStore(Protocol):
    """Protocol for an expiring key-value counter store."""

    def get(self, key: str) -> Any:
        """Return the stored count, or ``None`` when absent or expired.

        May return an awaitable.
        """
        ...

    def set(self, key: str, value: int, ttl_seconds: int) -> Any:
        """Store *value* under *key* for *ttl_seconds*. May return an awaitable."""
        ...


class MemoryCounterStore:
    """In-process counter store with per-key expiry.

    Suitable for a single worker and for tests. Counts are not shared
    between processes. Expired entries are dropped when read, and all at
    once whenever the store grows to ``sweep_threshold`` entries.
    """

    __slots__ = ("_clock", "_entries", "_lock", "_sweep_at", "_sweep_threshold")

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_threshold: int = 1024,
    ) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (value, expires_at)
        self._entries: dict[str, tuple[int, float]] = {}
        self._sweep_threshold = sweep_threshold
        self._sweep_at = sweep_threshold

    def get(self, key: str) -> int | None:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if expires_at <= now:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: int, ttl_seconds: int) -> None:
        now = self._clock()
        with self._lock:
            self._entries[key] = (value, now + ttl_seconds)
            if len(self._entries) >= self._sweep_at:
                self._sweep(now)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        """Number of entries that have not expired."""
        now = self._clock()
        with self._lock:
            self._sweep(now)
            return len(self._entries)

    def _sweep(self, now: float) -> None:
        # Caller holds the lock. The next sweep waits until the live set doubles.
        expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        self._sweep_at = max(self._sweep_threshold, 2 * len(self._entries))
