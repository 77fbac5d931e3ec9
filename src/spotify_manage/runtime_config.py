"""Runtime configuration normalization helpers.

These helpers keep CLI flag interpretation deterministic across entrypoints.
"""

from __future__ import annotations

import math

from spotify_manage.services.cache_store import DEFAULT_CACHE_TTL_S
from spotify_manage.services.player_proxy import DEFAULT_PLAYER_NAME, MPRIS_BUS_PREFIX

BACKENDS = ("dbus", "fake")


def resolve_log_level(*, verbose: bool, quiet: bool) -> str:
    """Resolve effective log level from CLI flags.

    Precedence is deterministic: --quiet overrides --verbose.
    """
    if quiet:
        return "WARNING"
    if verbose:
        return "DEBUG"
    return "INFO"


def resolve_player_bus_name(name: str | None) -> str:
    """Expand a short player name (`spotifyd`) into its MPRIS bus name."""
    normalized = (name or "").strip()
    if not normalized:
        normalized = DEFAULT_PLAYER_NAME
    if normalized.startswith(MPRIS_BUS_PREFIX):
        return normalized
    return f"{MPRIS_BUS_PREFIX}{normalized}"


def resolve_cache_ttl_s(value: float | None) -> float:
    """Normalize a CLI TTL value; unusable values fall back to the default."""
    if value is None or not math.isfinite(value) or value < 0:
        return DEFAULT_CACHE_TTL_S
    return float(value)


def normalize_backend(value: str | None) -> str:
    """Normalize backend name to a supported backend."""
    normalized = (value or "").strip().lower()
    if normalized in BACKENDS:
        return normalized
    return "dbus"
