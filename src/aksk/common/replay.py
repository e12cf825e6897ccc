"""In-memory nonce cache for rejecting replayed requests."""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from collections.abc import Callable


class NonceCache:
    """
    Remembers (access key, nonce, timestamp) triples for a TTL.

    Entries only need to outlive the timestamp window: anything older is
    already rejected as expired. Oldest entries are evicted past max_entries.
    """

    def __init__(
        self,
        ttl_seconds: float = 120.0,
        max_entries: int = 100_000,
        clock: Callable[[], float] = time.time,
    ):
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[tuple[str, str, str], float] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def check_and_store(self, access_key: str, nonce: str, timestamp: str) -> bool:
        """Return True if the triple is new, recording it; False on replay."""
        key = (access_key, nonce, timestamp)
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            if key in self._entries:
                return False
            self._entries[key] = now + self._ttl_seconds
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)
        return True

    def _evict_expired(self, now: float) -> None:
        while self._entries:
            oldest_key, expires_at = next(iter(self._entries.items()))
            if expires_at > now:
                break
            self._entries.pop(oldest_key)
