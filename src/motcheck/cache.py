"""TTL cache of lookup results keyed by normalized registration."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from cachetools import TTLCache

from motcheck._constants import CACHE_MAX_ENTRIES, CACHE_TTL_SECONDS
from motcheck.models.vehicle import VehicleRecord

_logger = logging.getLogger(__name__)


class ResultCache:
    """Map normalized registration -> :class:`VehicleRecord` with a fixed TTL.

    Thread-safe via a :class:`threading.Lock` around a
    :class:`cachetools.TTLCache`.  An entry whose age has reached the TTL
    reads as absent; every ``put`` drops expired entries, and once
    *maxsize* live entries are held the oldest is evicted.
    """

    ttl: float = CACHE_TTL_SECONDS

    def __init__(
        self,
        *,
        maxsize: int = CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: TTLCache[str, VehicleRecord] = TTLCache(maxsize=maxsize, ttl=self.ttl, timer=clock)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> VehicleRecord | None:
        """Return the cached record, or ``None`` if absent or expired."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, value: VehicleRecord) -> None:
        """Store *value* under *key*, replacing any prior entry."""
        with self._lock:
            self._entries[key] = value

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            expired = self._entries.expire()
        if expired:
            _logger.debug("Purged %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
