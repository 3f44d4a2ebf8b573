"""
Player record caching: TTL store with sweep-on-write eviction and request coalescing.
"""
from .core import CacheEntry
from .store import TTLCacheStore
from .coalescer import RequestCoalescer

__all__ = [
    "CacheEntry",
    "TTLCacheStore",
    "RequestCoalescer",
]
