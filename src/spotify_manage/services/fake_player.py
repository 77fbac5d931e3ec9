"""Fake MPRIS player for deterministic testing and offline use."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from spotify_manage.errors import RemoteCallError

_STATUS_AFTER_TOGGLE = {"Playing": "Paused", "Paused": "Playing", "Stopped": "Playing"}


@dataclass
class _FakeTrack:
    title: str
    artist: str
    length_us: int


DEFAULT_TRACKS = (
    _FakeTrack("One More Time", "Daft Punk", 320_000_000),
    _FakeTrack("Windowlicker", "Aphex Twin", 367_000_000),
    _FakeTrack("Teardrop", "Massive Attack", 330_000_000),
)


@dataclass
class _PlayerState:
    status: str = "Stopped"
    track_index: int = 0
    position_us: int = 0
    calls: list[str] = field(default_factory=list)


class FakePlayerProxy:
    """In-memory player that records every call made through the proxy."""

    def __init__(
        self,
        *,
        tracks: tuple[_FakeTrack, ...] = DEFAULT_TRACKS,
        metadata: Mapping[str, Any] | None = None,
        position: Any = 0,
        fail_on: frozenset[str] = frozenset(),
    ) -> None:
        self._tracks = tracks
        self._metadata_override = metadata
        self._state = _PlayerState(position_us=position)
        self._fail_on = fail_on

    @property
    def calls(self) -> list[str]:
        return self._state.calls

    @property
    def status(self) -> str:
        return self._state.status

    def call_count(self, name: str) -> int:
        return self._state.calls.count(name)

    def next(self) -> None:
        self._record("next")
        self._skip(1)

    def previous(self) -> None:
        self._record("previous")
        self._skip(-1)

    def pause(self) -> None:
        self._record("pause")
        if self._state.status == "Playing":
            self._state.status = "Paused"

    def play(self) -> None:
        self._record("play")
        self._state.status = "Playing"

    def play_pause(self) -> None:
        self._record("play_pause")
        self._state.status = _STATUS_AFTER_TOGGLE[self._state.status]

    def get_position(self) -> Any:
        self._record("position")
        return self._state.position_us

    def get_metadata(self) -> Mapping[str, Any]:
        self._record("metadata")
        if self._metadata_override is not None:
            return self._metadata_override
        if not self._tracks:
            return {}
        index = self._state.track_index
        track = self._tracks[index]
        return {
            "mpris:trackid": f"/org/mpris/MediaPlayer2/Track/{index}",
            "xesam:title": track.title,
            "xesam:artist": [track.artist],
            "mpris:length": track.length_us,
        }

    def get_playback_status(self) -> str:
        self._record("playback_status")
        return self._state.status

    def _skip(self, step: int) -> None:
        if not self._tracks:
            return
        self._state.track_index = (self._state.track_index + step) % len(self._tracks)
        self._state.position_us = 0

    def _record(self, name: str) -> None:
        self._state.calls.append(name)
        if name in self._fail_on:
            raise RemoteCallError(f"fake player rejected {name}")
