"""MPRIS player proxy over the D-Bus session bus using pydbus."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from spotify_manage.errors import BusConnectionError, RemoteCallError

from .player_proxy import MPRIS_OBJECT_PATH, MPRIS_PLAYER_INTERFACE

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DBusPlayerProxy:
    """Player proxy that forwards calls to a pydbus remote object."""

    def __init__(
        self,
        remote: Any,
        *,
        bus_name: str,
        error_types: tuple[type[BaseException], ...],
    ) -> None:
        self._remote = remote
        self._bus_name = bus_name
        self._error_types = error_types

    @property
    def bus_name(self) -> str:
        return self._bus_name

    def next(self) -> None:
        self._call("Next", lambda: self._remote.Next())

    def previous(self) -> None:
        self._call("Previous", lambda: self._remote.Previous())

    def pause(self) -> None:
        self._call("Pause", lambda: self._remote.Pause())

    def play(self) -> None:
        self._call("Play", lambda: self._remote.Play())

    def play_pause(self) -> None:
        self._call("PlayPause", lambda: self._remote.PlayPause())

    def get_position(self) -> Any:
        return self._call("Position", lambda: self._remote.Position)

    def get_metadata(self) -> Mapping[str, Any]:
        raw = self._call("Metadata", lambda: self._remote.Metadata)
        if not isinstance(raw, Mapping):
            raise RemoteCallError(
                f"{self._bus_name} returned {type(raw).__name__} for Metadata"
            )
        return raw

    def get_playback_status(self) -> str:
        return str(self._call("PlaybackStatus", lambda: self._remote.PlaybackStatus))

    def _call(self, member: str, operation: Callable[[], T]) -> T:
        logger.debug(
            "D-Bus %s.%s on %s", MPRIS_PLAYER_INTERFACE, member, self._bus_name
        )
        try:
            return operation()
        except self._error_types as exc:
            raise RemoteCallError(
                f"{self._bus_name} rejected {member}: {exc}"
            ) from exc


def connect_session_player(bus_name: str) -> DBusPlayerProxy:
    """Open the session bus and resolve the MPRIS player object for `bus_name`."""
    try:
        from gi.repository import GLib
        from pydbus import SessionBus
    except ImportError as exc:
        raise BusConnectionError(
            f"D-Bus bindings unavailable ({exc}); install pydbus and PyGObject."
        ) from exc

    try:
        bus = SessionBus()
    except GLib.Error as exc:
        raise BusConnectionError(f"Session bus unreachable: {exc}") from exc
    try:
        remote = bus.get(bus_name, MPRIS_OBJECT_PATH)
    except (GLib.Error, KeyError) as exc:
        raise BusConnectionError(f"Player {bus_name} not available: {exc}") from exc
    logger.debug(
        "Connected to %s at %s",
        bus_name,
        MPRIS_OBJECT_PATH,
        extra={"bus_name": bus_name},
    )
    return DBusPlayerProxy(remote, bus_name=bus_name, error_types=(GLib.Error,))
