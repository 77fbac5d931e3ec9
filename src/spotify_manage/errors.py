"""Exception hierarchy shared by the bus, decoder, cache and CLI layers."""

from __future__ import annotations

from typing import Literal

DecodeErrorKind = Literal["missing", "type"]


class SpotifyManageError(Exception):
    """Base exception for failures surfaced to the command-line caller."""


class BusConnectionError(SpotifyManageError):
    """Raised when the session bus or the player object cannot be reached."""


class RemoteCallError(SpotifyManageError):
    """Raised when the player rejects a method call or property read."""


class DecodeError(SpotifyManageError, ValueError):
    """Raised when the player metadata mapping does not narrow to `Metadata`."""

    def __init__(self, key: str, kind: DecodeErrorKind, detail: str) -> None:
        super().__init__(f"{key}: {detail}")
        self.key = key
        self.kind = kind


class CacheMissError(SpotifyManageError):
    """Raised when no cache record exists yet."""


class CacheCorruptError(SpotifyManageError):
    """Raised when the cache record cannot be parsed into `Metadata`."""


class CacheIOError(SpotifyManageError, OSError):
    """Raised when the cache file cannot be read or written."""


class ZeroLengthTrackError(SpotifyManageError, ZeroDivisionError):
    """Raised when progress is requested for a track reporting zero length."""
