"""Command-line interface for spotify-manage."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from . import __version__
from .doctor import render_report, run_doctor
from .errors import SpotifyManageError
from .logging_utils import setup_logging
from .paths import log_dir, metadata_cache_path
from .runtime_config import (
    BACKENDS,
    normalize_backend,
    resolve_cache_ttl_s,
    resolve_log_level,
    resolve_player_bus_name,
)
from .services.cache_store import InMemoryCacheStore, JsonFileCacheStore
from .services.dbus_player import connect_session_player
from .services.fake_player import FakePlayerProxy
from .services.now_playing import NowPlayingService
from .utils.time_format import format_elapsed_us
from .version import build_help_epilog

logger = logging.getLogger(__name__)

Action = Callable[[NowPlayingService], str | None]


def _elapsed(service: NowPlayingService) -> str:
    metadata = service.get_metadata()
    return format_elapsed_us(metadata.position, metadata.length)


# Combined flags always run in this order.
ACTIONS: tuple[tuple[str, str, Action], ...] = (
    ("play", "Start playback", lambda s: s.player.play()),
    ("pause", "Pause playback", lambda s: s.player.pause()),
    ("next", "Skip to the next track", lambda s: s.player.next()),
    ("previous", "Go back to the previous track", lambda s: s.player.previous()),
    (
        "progress",
        "Print track progress (0.0-1.0)",
        lambda s: f"{s.get_song_progress()}",
    ),
    ("song", "Print 'Artist - Title'", lambda s: s.get_song_name()),
    ("time", "Print elapsed and total time", _elapsed),
    ("status", "Print the playback status", lambda s: s.get_playback_status()),
    ("playpause", "Toggle play/pause", lambda s: s.player.play_pause()),
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spotify-manage",
        description="Query and control an MPRIS media player over D-Bus.",
        epilog=build_help_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    actions = parser.add_argument_group("actions")
    for name, help_text, _action in ACTIONS:
        actions.add_argument(f"--{name}", action="store_true", help=help_text)

    parser.add_argument(
        "--player",
        help="MPRIS player name or full bus name (default: spotifyd).",
    )
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default="dbus",
        help="Player backend to use (dbus or fake).",
    )
    parser.add_argument("--cache-file", help="Now-playing cache file path")
    parser.add_argument(
        "--cache-ttl",
        type=float,
        help="Seconds a cached now-playing record stays fresh (default: 3).",
    )
    parser.add_argument(
        "--doctor", action="store_true", help="Diagnose D-Bus and cache setup"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--quiet", action="store_true", help="Only show warnings and errors"
    )
    parser.add_argument("--log-file", help="Write logs to a file path")
    return parser


def build_service(args: argparse.Namespace) -> NowPlayingService:
    """Wire the player backend and cache store selected on the command line."""
    ttl_s = resolve_cache_ttl_s(args.cache_ttl)
    if normalize_backend(args.backend) == "fake":
        player = FakePlayerProxy()
        return NowPlayingService(lambda: player, InMemoryCacheStore(ttl_s=ttl_s))
    bus_name = resolve_player_bus_name(args.player)
    cache = JsonFileCacheStore(_cache_path(args), ttl_s=ttl_s)
    return NowPlayingService(lambda: connect_session_player(bus_name), cache)


def run_actions(service: NowPlayingService, args: argparse.Namespace) -> None:
    """Run every requested action in order; the first failure stops the rest."""
    for name, _help_text, action in ACTIONS:
        if not getattr(args, name, False):
            continue
        logger.debug("Running action %s", name)
        output = action(service)
        if output is not None:
            print(output)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        level = resolve_log_level(verbose=args.verbose, quiet=args.quiet)
        setup_logging(
            log_dir=log_dir(),
            level=level,
            log_file=Path(args.log_file) if args.log_file else None,
        )
    except Exception as exc:  # pragma: no cover - top-level safety net
        logger.exception("Logging setup failed: %s", exc)
        print("Unexpected error. Re-run with --verbose for details.", file=sys.stderr)
        return 1

    if args.doctor:
        report = run_doctor(resolve_player_bus_name(args.player), _cache_path(args))
        print(render_report(report))
        return report.exit_code

    try:
        run_actions(build_service(args), args)
        return 0
    except SpotifyManageError as exc:
        logger.error("Command failed: %s", exc)
        print(f"spotify-manage: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover - top-level safety net
        logger.exception("Unhandled error: %s", exc)
        print("Unexpected error. Re-run with --verbose for details.", file=sys.stderr)
        return 1


def _cache_path(args: argparse.Namespace) -> Path:
    return Path(args.cache_file) if args.cache_file else metadata_cache_path()


if __name__ == "__main__":
    raise SystemExit(main())
