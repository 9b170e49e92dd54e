"""Process-local TTL cache for weather snapshots.

Entries are keyed by the lower-cased normalized location. Age is measured
from the time of ``put``; reads never extend it. Stale entries are dropped on
read and by ``sweep``, which the background sweeper calls periodically.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..schemas.weather import WeatherSnapshot


@dataclass(frozen=True)
class CacheEntry:
    payload: WeatherSnapshot
    fetched_at: float


class WeatherCache:
    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.fetched_at < self.ttl_seconds

    def get(self, key: str) -> Optional[WeatherSnapshot]:
        """Return the cached snapshot marked as ``source="cache"``, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_fresh(entry, self._clock()):
                del self._entries[key]
                return None
        return entry.payload.model_copy(update={"source": "cache"})

    def put(self, key: str, snapshot: WeatherSnapshot) -> None:
        entry = CacheEntry(payload=snapshot, fetched_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def sweep(self) -> int:
        """Drop every expired entry and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if not self._is_fresh(e, now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
