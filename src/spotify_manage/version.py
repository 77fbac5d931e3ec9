"""Help epilog metadata for the command-line entrypoint."""

from __future__ import annotations

import platform

from . import __version__

__all__ = ["build_help_epilog"]


def build_help_epilog() -> str:
    return (
        "Combined action flags run in this order: play, pause, next, previous,\n"
        "progress, song, time, status, playpause.\n"
        f"Platform: {platform.platform()}\n"
        f"Version: {__version__}"
    )
