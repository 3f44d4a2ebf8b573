"""
Player details orchestration: cache check, coalesced Lounge fetch, write-through.
"""
import logging
from typing import Optional

from app.api_client import LoungeClient
from app.cache import RequestCoalescer, TTLCacheStore
from app.errors import UpstreamNetworkError
from app.schemas import PlayerRecord
from app.utils.helpers import cache_key, safe_strip, upstream_game
from app.view_models import player_record_from_upstream
from config.settings import settings

logger = logging.getLogger("players")


class PlayerService:
    """
    Read-through cache in front of the Lounge API.

    Per request:
        CHECK_CACHE -> HIT -> done
        CHECK_CACHE -> MISS/STALE -> FETCH -> TRANSFORM -> STORE -> done
        FETCH or TRANSFORM fails -> error propagates, nothing is written

    A stale entry is never used as a fallback when the fetch fails.
    """

    def __init__(
        self,
        store: TTLCacheStore,
        coalescer: RequestCoalescer,
        client: LoungeClient,
    ):
        self.store = store
        self.coalescer = coalescer
        self.client = client

    def get_player(self, name: str, game: Optional[str] = None) -> PlayerRecord:
        """
        Get a player's record, from cache when fresh.

        Args:
            name: Validated player name (surrounding whitespace is ignored)
            game: "12p" for the 12-player ladder, anything else for 24p

        Raises:
            UpstreamError: Network, status or decode failure from the Lounge
        """
        key = cache_key(name, game)

        cached = self.store.lookup(key)
        if cached is not None:
            logger.info(f"CACHE HIT: {key}")
            return cached

        logger.info(f"CACHE MISS: {key}")
        try:
            return self.coalescer.get_or_fetch(
                key, lambda: self._fetch_and_store(key, name, game)
            )
        except TimeoutError as e:
            raise UpstreamNetworkError(e) from e

    def _fetch_and_store(self, key: str, name: str, game: Optional[str]) -> PlayerRecord:
        # A fetch for this key may have landed between our miss and taking the lead
        cached = self.store.lookup(key, count_stats=False)
        if cached is not None:
            return cached

        raw = self.client.fetch_player_details(safe_strip(name), upstream_game(game))
        record = player_record_from_upstream(raw)
        self.store.store(key, record)
        return record

    def get_stats(self) -> dict:
        return {
            "cache": self.store.get_stats(),
            "coalescer": self.coalescer.get_stats(),
        }


# Process-wide service, built on first use
_player_service: Optional[PlayerService] = None


def get_player_service() -> PlayerService:
    """Get or create the shared player service."""
    global _player_service
    if _player_service is None:
        _player_service = PlayerService(
            store=TTLCacheStore(
                fresh_ttl_seconds=settings.cache_ttl_seconds,
                eviction_multiplier=settings.cache_eviction_multiplier,
            ),
            coalescer=RequestCoalescer(timeout=settings.coalesce_timeout_seconds),
            client=LoungeClient(),
        )
    return _player_service


def close_player_service() -> None:
    """Release the shared service's upstream session, if one was built."""
    global _player_service
    if _player_service is not None:
        _player_service.client.close()
        _player_service = None
