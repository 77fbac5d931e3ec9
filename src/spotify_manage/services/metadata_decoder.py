"""Narrow the loosely typed MPRIS metadata mapping into `Metadata`.

MPRIS exposes `Metadata` as an `a{sv}` dictionary: every value is a variant
whose concrete type is only known at runtime. pydbus unpacks variants into
plain Python values, so narrowing here means checking the runtime type of each
required entry. This is the only module that inspects the raw mapping; every
other component works with `Metadata`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from spotify_manage.errors import DecodeError
from spotify_manage.models import Metadata

TITLE_KEY = "xesam:title"
ARTIST_KEY = "xesam:artist"
LENGTH_KEY = "mpris:length"
POSITION_KEY = "Position"

_MISSING = object()


def decode_metadata(
    raw: Mapping[str, Any], position: Any, *, now: float
) -> Metadata:
    """Build a `Metadata` from the player mapping and a separately read position.

    Raises `DecodeError` when a required key is absent or holds a value of the
    wrong shape. Nothing is returned unless every field narrowed.
    """
    title = _narrow_str(_lookup(raw, TITLE_KEY), TITLE_KEY)
    artist = _narrow_first_str(_lookup(raw, ARTIST_KEY), ARTIST_KEY)
    length = _narrow_int(_lookup(raw, LENGTH_KEY), LENGTH_KEY)
    if length < 0:
        raise DecodeError(LENGTH_KEY, "type", f"negative length {length}")
    current = _narrow_int(position, POSITION_KEY)
    if current < 0:
        raise DecodeError(POSITION_KEY, "type", f"negative position {current}")
    return Metadata(
        title=title,
        artist=artist,
        length=length,
        position=current,
        timestamp=now,
    )


def _lookup(raw: Mapping[str, Any], key: str) -> Any:
    value = raw.get(key, _MISSING)
    if value is _MISSING:
        raise DecodeError(key, "missing", "key not present in player metadata")
    return value


def _narrow_str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(key, "type", f"expected string, got {_type_name(value)}")
    if not value:
        raise DecodeError(key, "type", "empty string")
    return value


def _narrow_first_str(value: Any, key: str) -> str:
    # `as` arrives as a list; str and bytes are sequences too.
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise DecodeError(
            key, "type", f"expected list of strings, got {_type_name(value)}"
        )
    if not value:
        raise DecodeError(key, "type", "empty list")
    first = value[0]
    if not isinstance(first, str):
        raise DecodeError(
            key, "type", f"expected string element, got {_type_name(first)}"
        )
    return first


def _narrow_int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(key, "type", f"expected integer, got {_type_name(value)}")
    return value


def _type_name(value: Any) -> str:
    return type(value).__name__
