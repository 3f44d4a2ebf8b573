"""
Thread-safe TTL store for player records.
"""
import threading
import time
import logging
from typing import Callable, Dict, Optional, Any

from app.schemas import PlayerRecord
from .core import CacheEntry

logger = logging.getLogger("cache.store")


class TTLCacheStore:
    """
    Key/value store with per-entry timestamps.

    - lookup() only returns fresh records and never mutates the map
    - store() replaces the entry for a key, then sweeps every entry past the
      eviction threshold (ttl * eviction_multiplier)
    - No background timer; eviction only happens on writes

    All access to the map goes through the lock. Entries are immutable, so a
    concurrent reader sees either the old or the new entry for a key.
    """

    def __init__(
        self,
        fresh_ttl_seconds: float = 60,
        eviction_multiplier: float = 2,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the store.

        Args:
            fresh_ttl_seconds: How long a record is served without refetching
            eviction_multiplier: Entries older than ttl * multiplier are swept
            clock: Monotonic time source, injectable for tests
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock
        self.fresh_ttl_seconds = fresh_ttl_seconds
        self.eviction_seconds = fresh_ttl_seconds * eviction_multiplier

        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0,
        }

    def lookup(self, key: str, count_stats: bool = True) -> Optional[PlayerRecord]:
        """
        Return the stored record if present and fresh.

        Stale entries are left in place; only a store() sweep removes them.

        Args:
            key: Canonical player cache key
            count_stats: False for internal re-checks that must not skew hit/miss counts
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            fresh = entry is not None and entry.is_fresh(now, self.fresh_ttl_seconds)
            if count_stats:
                self._stats["hits" if fresh else "misses"] += 1
        return entry.value if fresh else None

    def store(self, key: str, record: PlayerRecord) -> int:
        """
        Insert or replace the record for a key, then sweep expired entries.

        Returns:
            Number of entries evicted by the sweep
        """
        now = self._clock()
        entry = CacheEntry(key=key, value=record, stored_at=now)
        with self._lock:
            self._entries[key] = entry
            expired = [
                k for k, e in self._entries.items()
                if e.is_expired(now, self.eviction_seconds)
            ]
            for k in expired:
                del self._entries[k]
            self._stats["evictions"] += len(expired)

        if expired:
            logger.debug(f"Evicted {len(expired)} expired entries")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        """Physical presence, fresh or not."""
        with self._lock:
            return key in self._entries

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._lock:
            total = self._stats["hits"] + self._stats["misses"]
            hit_rate = (self._stats["hits"] / total * 100) if total > 0 else 0

            return {
                "entries": len(self._entries),
                "hits": self._stats["hits"],
                "misses": self._stats["misses"],
                "evictions": self._stats["evictions"],
                "hit_rate_percent": round(hit_rate, 1),
                "fresh_ttl_seconds": self.fresh_ttl_seconds,
                "eviction_seconds": self.eviction_seconds,
            }
