"""
Core cache data structures.
"""
from dataclasses import dataclass

from app.schemas import PlayerRecord


@dataclass(frozen=True)
class CacheEntry:
    """
    A cached player record with the monotonic time it was stored.

    Entries are immutable; a newer fetch replaces the whole entry.
    """
    key: str
    value: PlayerRecord
    stored_at: float

    def age_seconds(self, now: float) -> float:
        """Seconds since the record was stored."""
        return now - self.stored_at

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        """Check if the record can still be served directly."""
        return self.age_seconds(now) < ttl_seconds

    def is_expired(self, now: float, eviction_seconds: float) -> bool:
        """Check if the entry should be dropped by the next sweep."""
        return self.age_seconds(now) >= eviction_seconds
