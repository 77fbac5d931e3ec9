"""Tests for the now-playing query facade."""

from __future__ import annotations

import json
import logging

import pytest

from spotify_manage.errors import (
    BusConnectionError,
    CacheIOError,
    DecodeError,
    RemoteCallError,
    ZeroLengthTrackError,
)
from spotify_manage.services.cache_store import InMemoryCacheStore, JsonFileCacheStore
from spotify_manage.services.fake_player import FakePlayerProxy
from spotify_manage.services.now_playing import NowPlayingService


def _service(player, cache, clock) -> NowPlayingService:
    return NowPlayingService(lambda: player, cache, clock=clock)


def test_cold_cache_fetches_once_then_serves_from_cache(
    tmp_path, clock, track_metadata
) -> None:
    path = tmp_path / "now_playing.json"
    player = FakePlayerProxy(metadata=track_metadata, position=50_000)
    service = _service(player, JsonFileCacheStore(path), clock)

    first = service.get_metadata()

    assert player.call_count("metadata") == 1
    assert player.call_count("position") == 1
    assert json.loads(path.read_text(encoding="utf-8"))["title"] == "One More Time"

    clock.advance(1.5)
    second = service.get_metadata()

    assert second == first
    assert player.calls == ["metadata", "position"]


def test_fresh_cache_hit_never_opens_player(clock, make_metadata) -> None:
    cache = InMemoryCacheStore()
    cache.write(make_metadata(timestamp=clock.now))

    def forbidden_factory():
        raise AssertionError("player should not be opened on a fresh cache hit")

    service = NowPlayingService(forbidden_factory, cache, clock=clock)

    assert service.get_metadata().title == "One More Time"


def test_stale_cache_refetches(clock, make_metadata, track_metadata) -> None:
    cache = InMemoryCacheStore()
    cache.write(make_metadata(title="Old Song", timestamp=clock.now - 10))
    player = FakePlayerProxy(metadata=track_metadata, position=1_000)

    metadata = _service(player, cache, clock).get_metadata()

    assert metadata.title == "One More Time"
    assert metadata.position == 1_000
    assert metadata.timestamp == clock.now
    assert cache.read() == metadata
    assert player.call_count("metadata") == 1


def test_corrupt_cache_is_treated_as_miss(
    tmp_path, clock, track_metadata, caplog
) -> None:
    path = tmp_path / "now_playing.json"
    path.write_text("{half-written", encoding="utf-8")
    player = FakePlayerProxy(metadata=track_metadata, position=0)
    service = _service(player, JsonFileCacheStore(path), clock)

    with caplog.at_level(logging.WARNING):
        metadata = service.get_metadata()

    assert metadata.title == "One More Time"
    assert JsonFileCacheStore(path).read() == metadata
    assert any("unreadable" in record.message for record in caplog.records)


@pytest.mark.parametrize(
    "content",
    [
        b"\xff\xfe garbage",
        b'{"title": "x", "artist": "y", "length": 1, "position": 0, "timestamp": 1'
        + b"0" * 400
        + b"}",
    ],
)
def test_undecodable_cache_refetches_from_player(
    tmp_path, clock, track_metadata, content: bytes
) -> None:
    path = tmp_path / "now_playing.json"
    path.write_bytes(content)
    player = FakePlayerProxy(metadata=track_metadata, position=0)
    service = _service(player, JsonFileCacheStore(path), clock)

    assert service.get_song_name() == "Daft Punk - One More Time"
    assert player.call_count("metadata") == 1
    assert JsonFileCacheStore(path).read().title == "One More Time"


def test_decode_failure_propagates_and_writes_nothing(clock) -> None:
    cache = InMemoryCacheStore()
    player = FakePlayerProxy(metadata={"xesam:title": "Only a title"})

    with pytest.raises(DecodeError):
        _service(player, cache, clock).get_metadata()

    assert cache.writes == 0


def test_cache_write_failure_propagates(tmp_path, clock, monkeypatch) -> None:
    cache = JsonFileCacheStore(tmp_path / "now_playing.json")

    def fail_write(metadata) -> None:
        raise CacheIOError("disk full")

    monkeypatch.setattr(cache, "write", fail_write)

    with pytest.raises(CacheIOError):
        _service(FakePlayerProxy(), cache, clock).get_metadata()


def test_player_opened_once_per_service(clock) -> None:
    opened: list[FakePlayerProxy] = []

    def factory() -> FakePlayerProxy:
        player = FakePlayerProxy()
        opened.append(player)
        return player

    service = NowPlayingService(factory, InMemoryCacheStore(ttl_s=0.0), clock=clock)
    service.get_metadata()
    service.get_metadata()
    service.player.play()

    assert len(opened) == 1
    assert opened[0].calls == ["metadata", "position"] * 2 + ["play"]


def test_song_progress(clock, make_metadata) -> None:
    cache = InMemoryCacheStore()
    cache.write(make_metadata(position=50_000, length=200_000, timestamp=clock.now))

    assert _service(FakePlayerProxy(), cache, clock).get_song_progress() == 0.25


def test_song_progress_zero_length_raises(clock, make_metadata) -> None:
    cache = InMemoryCacheStore()
    cache.write(make_metadata(length=0, timestamp=clock.now))
    service = _service(FakePlayerProxy(), cache, clock)

    with pytest.raises(ZeroLengthTrackError):
        service.get_song_progress()
    with pytest.raises(ZeroDivisionError):
        service.get_song_progress()


def test_song_progress_has_no_fallback(clock, make_metadata) -> None:
    cache = InMemoryCacheStore()
    cache.write(make_metadata(timestamp=clock.now - 60))
    player = FakePlayerProxy(fail_on=frozenset({"metadata"}))

    with pytest.raises(RemoteCallError):
        _service(player, cache, clock).get_song_progress()


def test_song_name(clock, make_metadata) -> None:
    cache = InMemoryCacheStore()
    cache.write(
        make_metadata(artist="Daft Punk", title="One More Time", timestamp=clock.now)
    )

    name = _service(FakePlayerProxy(), cache, clock).get_song_name()

    assert name == "Daft Punk - One More Time"


def test_song_name_falls_back_to_stale_cache(clock, make_metadata, caplog) -> None:
    cache = InMemoryCacheStore()
    cache.write(make_metadata(artist="Air", title="La Femme d'Argent", timestamp=0.0))

    def unreachable():
        raise BusConnectionError("no session bus")

    service = NowPlayingService(unreachable, cache, clock=clock)

    with caplog.at_level(logging.WARNING):
        assert service.get_song_name() == "Air - La Femme d'Argent"
    assert any("using cached name" in record.message for record in caplog.records)


def test_song_name_raises_original_error_without_cache(clock) -> None:
    player = FakePlayerProxy(fail_on=frozenset({"metadata"}))

    with pytest.raises(RemoteCallError):
        _service(player, InMemoryCacheStore(), clock).get_song_name()


def test_playback_status_passes_through(clock) -> None:
    player = FakePlayerProxy()
    service = _service(player, InMemoryCacheStore(), clock)

    player.play()

    assert service.get_playback_status() == "Playing"
