"""Now-playing value types shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Metadata:
    """Snapshot of the current track captured from the player or the cache.

    `length` and `position` are microseconds, as reported over MPRIS.
    `timestamp` is the capture time in seconds since the Unix epoch.
    """

    title: str
    artist: str
    length: int
    position: int
    timestamp: float

    @property
    def song_name(self) -> str:
        return f"{self.artist} - {self.title}"
