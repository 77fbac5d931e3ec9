"""Time formatting helpers for MPRIS microsecond values."""

from __future__ import annotations

import math

_US_PER_SECOND = 1_000_000


def format_elapsed_us(position_us: int, length_us: int) -> str:
    """Format `position / length` with a shared width, e.g. `01:02 / 03:45`."""
    position_s = _whole_seconds(position_us)
    length_s = _whole_seconds(length_us)
    hours_mode = position_s >= 3600 or length_s >= 3600
    position = _format_seconds(position_s, force_hours=hours_mode)
    if length_s <= 0:
        placeholder = "--:--:--" if hours_mode else "--:--"
        return f"{position} / {placeholder}"
    return f"{position} / {_format_seconds(length_s, force_hours=hours_mode)}"


def _format_seconds(total_seconds: int, *, force_hours: bool) -> str:
    hours = total_seconds // 3600
    minutes = (total_seconds // 60) % 60
    seconds = total_seconds % 60
    if hours > 0 or force_hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def _whole_seconds(value: int) -> int:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(numeric):
        return 0
    return max(0, int(numeric)) // _US_PER_SECOND
