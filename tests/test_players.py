"""
Tests for the read-through player service.
"""
import threading
import time
from unittest.mock import MagicMock

import pytest

from app.cache import RequestCoalescer
from app.errors import UpstreamDecodeError, UpstreamNetworkError, UpstreamStatusError
from app import players
from app.players import PlayerService

from conftest import StubLoungeClient, make_payload


def test_miss_fetches_transforms_and_stores(service, stub_client, store):
    record = service.get_player("  Foo Bar ", None)

    assert record.name == "Foo Bar"
    assert record.last_diff == 42
    assert stub_client.calls == [("Foo Bar", "mkworld24p")]
    assert store.lookup("foo bar:mkworld24p") == record


def test_hit_skips_upstream(service, stub_client):
    first = service.get_player("Foo Bar")
    second = service.get_player("FOO BAR")

    assert second == first
    assert len(stub_client.calls) == 1


def test_variants_are_cached_separately(service, stub_client):
    service.get_player("Foo Bar", "12p")
    service.get_player("Foo Bar", None)
    assert stub_client.calls == [("Foo Bar", "mkworld12p"), ("Foo Bar", "mkworld24p")]


def test_stale_entry_is_refetched(service, stub_client, clock):
    service.get_player("Foo Bar")
    clock.advance(60)
    stub_client.payload = make_payload(mmr=9999)

    record = service.get_player("Foo Bar")

    assert record.mmr == 9999
    assert len(stub_client.calls) == 2


@pytest.mark.parametrize("error", [
    UpstreamNetworkError("Read timed out. (read timeout=10)"),
    UpstreamStatusError(404, "Player not found"),
    UpstreamDecodeError("missing field name"),
])
def test_failure_propagates_without_cache_write(service, stub_client, store, error):
    stub_client.error = error

    with pytest.raises(type(error)) as exc_info:
        service.get_player("Foo Bar")

    assert exc_info.value is error
    assert "foo bar:mkworld24p" not in store
    assert len(store) == 0


def test_failure_leaves_stale_entry_untouched(service, stub_client, store, clock):
    """A stale record is never served as a fallback"""
    original = service.get_player("Foo Bar")
    clock.advance(61)
    stub_client.error = UpstreamNetworkError("connection refused")

    with pytest.raises(UpstreamNetworkError):
        service.get_player("Foo Bar")

    assert "foo bar:mkworld24p" in store
    clock.advance(-61)
    assert store.lookup("foo bar:mkworld24p") == original


def test_concurrent_misses_share_one_upstream_call(store):
    gate = threading.Event()
    client = StubLoungeClient(payload=make_payload(), gate=gate)
    coalescer = RequestCoalescer(timeout=5)
    service = PlayerService(store=store, coalescer=coalescer, client=client)

    results = []
    threads = [
        threading.Thread(target=lambda: results.append(service.get_player("Foo Bar")))
        for _ in range(6)
    ]
    for t in threads:
        t.start()
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        in_flight = coalescer._in_flight.get("foo bar:mkworld24p")
        if in_flight is not None and in_flight.waiter_count == 5:
            break
        time.sleep(0.01)
    gate.set()
    for t in threads:
        t.join()

    assert len(client.calls) == 1
    assert len(results) == 6
    assert all(r == results[0] for r in results)


def test_coalescer_timeout_is_a_network_error(store):
    gate = threading.Event()
    client = StubLoungeClient(payload=make_payload(), gate=gate)
    coalescer = RequestCoalescer(timeout=0.05)
    service = PlayerService(store=store, coalescer=coalescer, client=client)

    leader = threading.Thread(target=service.get_player, args=("Foo Bar",))
    leader.start()
    deadline = time.monotonic() + 5
    while not client.calls and time.monotonic() < deadline:
        time.sleep(0.01)

    with pytest.raises(UpstreamNetworkError, match="Network error"):
        service.get_player("Foo Bar")

    gate.set()
    leader.join()


def test_stats(service):
    service.get_player("Foo Bar")
    stats = service.get_stats()
    assert stats["cache"]["entries"] == 1
    assert stats["coalescer"] == {"in_flight": 0}


def test_cold_miss_is_counted_once(service):
    """The leader's re-check of the cache does not count as a second miss"""
    service.get_player("Foo Bar")
    stats = service.get_stats()["cache"]
    assert stats["misses"] == 1
    assert stats["hits"] == 0

    service.get_player("Foo Bar")
    stats = service.get_stats()["cache"]
    assert stats["misses"] == 1
    assert stats["hits"] == 1
    assert stats["hit_rate_percent"] == 50.0


def test_stats_do_not_expose_player_names(service):
    service.get_player("Foo Bar")
    assert "foo bar" not in str(service.get_stats())


def test_close_player_service_releases_session(monkeypatch, store):
    client = MagicMock()
    shared = PlayerService(store=store, coalescer=RequestCoalescer(), client=client)
    monkeypatch.setattr(players, "_player_service", shared)

    players.close_player_service()

    client.close.assert_called_once_with()
    assert players._player_service is None


def test_close_player_service_without_service(monkeypatch):
    monkeypatch.setattr(players, "_player_service", None)
    players.close_player_service()
    assert players._player_service is None
