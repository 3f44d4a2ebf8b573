"""
Shared fixtures: a controllable clock, a stub Lounge client, sample payloads.
"""
import threading

import pytest

from app.cache import RequestCoalescer, TTLCacheStore
from app.players import PlayerService
from app.schemas import UpstreamRecord


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubLoungeClient:
    """Records calls; returns a payload or raises a configured error."""

    def __init__(self, payload=None, error=None, gate: threading.Event = None):
        self.payload = payload
        self.error = error
        self.gate = gate
        self.calls = []
        self._lock = threading.Lock()

    def fetch_player_details(self, name, game):
        with self._lock:
            self.calls.append((name, game))
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return UpstreamRecord.model_validate(self.payload)


def make_payload(name="Foo Bar", **overrides):
    """Lounge-shaped player payload (camelCase, as the upstream sends it)."""
    payload = {
        "playerId": 4521,
        "name": name,
        "countryCode": "CA",
        "countryName": "Canada",
        "mmr": 8450,
        "maxMmr": 9012,
        "overallRank": 212,
        "eventsPlayed": 87,
        "winRate": 0.56,
        "winLossLastTen": "6-4",
        "gainLossLastTen": 143,
        "largestGain": 188,
        "averageScore": 81.4,
        "averageLastTen": 84.2,
        "rank": "Diamond",
        "mmrChanges": [
            {"changeId": 3, "mmrDelta": 42, "reason": "Table", "partnerScores": [70, 90]},
            {"changeId": 2, "mmrDelta": -15, "reason": "Penalty", "partnerScores": []},
            {"changeId": 1, "mmrDelta": -30, "reason": "Table", "partnerScores": [80]},
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return TTLCacheStore(fresh_ttl_seconds=60, eviction_multiplier=2, clock=clock)


@pytest.fixture
def stub_client():
    return StubLoungeClient(payload=make_payload())


@pytest.fixture
def service(store, stub_client):
    return PlayerService(store=store, coalescer=RequestCoalescer(timeout=5), client=stub_client)
