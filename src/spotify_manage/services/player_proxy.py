"""Player control contract consumed by the query facade and the CLI.

`NowPlayingService` and the CLI depend on this protocol to stay transport
agnostic. Concrete implementations (D-Bus/fake) translate transport-specific
failures into `BusConnectionError` and `RemoteCallError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

MPRIS_BUS_PREFIX = "org.mpris.MediaPlayer2."
MPRIS_OBJECT_PATH = "/org/mpris/MediaPlayer2"
MPRIS_PLAYER_INTERFACE = "org.mpris.MediaPlayer2.Player"
DEFAULT_PLAYER_NAME = "spotifyd"


class PlayerProxy(Protocol):
    """Remote MPRIS player surface: transport controls and property reads."""

    def next(self) -> None: ...

    def previous(self) -> None: ...

    def pause(self) -> None: ...

    def play(self) -> None: ...

    def play_pause(self) -> None: ...

    def get_position(self) -> Any: ...

    def get_metadata(self) -> Mapping[str, Any]: ...

    def get_playback_status(self) -> str: ...
