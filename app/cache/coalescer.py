"""
Request coalescing so concurrent cache misses share one Lounge call.

When several requests miss the cache for the same player key at once, only
the first one goes upstream; the others block on its Future and receive the
same record (or the same error).
"""
import threading
import logging
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Callable, Dict, TypeVar

logger = logging.getLogger("cache.coalescer")

T = TypeVar("T")


@dataclass
class InFlightFetch:
    """Shared outcome of one upstream fetch, plus how many callers joined it."""
    future: Future = field(default_factory=Future)
    waiter_count: int = 0


class RequestCoalescer:
    """
    At most one fetch in flight per key.

    The leader runs fetch_fn and settles the Future; the in-flight marker is
    always released once the leader is done, whether the fetch failed or not.
    """

    def __init__(self, timeout: float = 30.0):
        """
        Args:
            timeout: Max seconds a waiter blocks on someone else's fetch
        """
        self._in_flight: Dict[str, InFlightFetch] = {}
        self._lock = threading.Lock()
        self._timeout = timeout

    def get_or_fetch(self, key: str, fetch_fn: Callable[[], T]) -> T:
        """
        Join the in-flight fetch for key, or run fetch_fn as its leader.

        Raises:
            TimeoutError: If a waiter gives up on the leader's fetch
            Exception: Whatever fetch_fn raised, re-raised to every caller
        """
        with self._lock:
            in_flight = self._in_flight.get(key)
            if in_flight is None:
                in_flight = self._in_flight[key] = InFlightFetch()
                leader = True
            else:
                in_flight.waiter_count += 1
                leader = False

        if leader:
            self._lead(key, in_flight.future, fetch_fn)
            return in_flight.future.result()

        logger.debug(f"Joining fetch for {key} (waiters: {in_flight.waiter_count})")
        try:
            return in_flight.future.result(timeout=self._timeout)
        except FutureTimeoutError:
            logger.error(f"Timeout waiting for coalesced fetch: {key}")
            raise TimeoutError(f"Fetch for {key} timed out after {self._timeout}s") from None

    def _lead(self, key: str, future: Future, fetch_fn: Callable[[], T]) -> None:
        try:
            future.set_result(fetch_fn())
        except Exception as e:
            future.set_exception(e)
        finally:
            with self._lock:
                self._in_flight.pop(key, None)

    @property
    def active_requests(self) -> int:
        """Number of fetches currently in flight."""
        with self._lock:
            return len(self._in_flight)

    def get_stats(self) -> Dict[str, int]:
        return {"in_flight": self.active_requests}
