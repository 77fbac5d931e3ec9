"""Single-slot persistence for the last fetched `Metadata`.

The cache holds exactly one record. Readers treat a missing or unparsable
record as a miss and refetch from the player; only genuine filesystem failures
propagate as `CacheIOError`.
"""

from __future__ import annotations

import json
import logging
import math
from contextlib import suppress
from dataclasses import asdict
from pathlib import Path
from typing import Any, Protocol
from uuid import uuid4

from spotify_manage.errors import CacheCorruptError, CacheIOError, CacheMissError
from spotify_manage.models import Metadata

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL_S = 3.0


class CacheStore(Protocol):
    """Storage contract for the now-playing cache slot."""

    def read(self) -> Metadata: ...

    def write(self, metadata: Metadata) -> None: ...

    def is_fresh(self, metadata: Metadata, now: float) -> bool: ...


def is_fresh(
    metadata: Metadata, now: float, ttl_s: float = DEFAULT_CACHE_TTL_S
) -> bool:
    """Return whether `metadata` was captured less than `ttl_s` seconds ago.

    Records stamped in the future (clock moved backwards) are stale.
    """
    age = now - metadata.timestamp
    return 0.0 <= age < ttl_s


class JsonFileCacheStore:
    """Cache slot backed by one JSON file replaced on every write."""

    def __init__(self, path: Path, *, ttl_s: float = DEFAULT_CACHE_TTL_S) -> None:
        self._path = path
        self._ttl_s = ttl_s

    @property
    def path(self) -> Path:
        return self._path

    @property
    def ttl_s(self) -> float:
        return self._ttl_s

    def read(self) -> Metadata:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise CacheMissError(f"No cache record at {self._path}") from exc
        except UnicodeDecodeError as exc:
            raise CacheCorruptError(
                f"Cache record at {self._path} is not valid UTF-8"
            ) from exc
        except OSError as exc:
            raise CacheIOError(f"Failed to read cache {self._path}: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CacheCorruptError(
                f"Cache record at {self._path} is invalid JSON"
            ) from exc
        return _coerce_record(data, self._path)

    def write(self, metadata: Metadata) -> None:
        """Persist the record via write-then-replace."""
        payload = json.dumps(asdict(metadata), sort_keys=True)
        tmp_path = self._path.with_name(f"{self._path.name}.{uuid4().hex}.tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(payload, encoding="utf-8")
            tmp_path.replace(self._path)
        except OSError as exc:
            raise CacheIOError(f"Failed to write cache {self._path}: {exc}") from exc
        finally:
            with suppress(OSError):
                tmp_path.unlink()
        logger.debug(
            "Cached now-playing record at %s",
            self._path,
            extra={"cache_path": str(self._path)},
        )

    def is_fresh(self, metadata: Metadata, now: float) -> bool:
        return is_fresh(metadata, now, self._ttl_s)


class InMemoryCacheStore:
    """Process-local cache slot used by tests and the fake backend."""

    def __init__(self, *, ttl_s: float = DEFAULT_CACHE_TTL_S) -> None:
        self._ttl_s = ttl_s
        self._record: Metadata | None = None
        self.writes = 0

    def read(self) -> Metadata:
        if self._record is None:
            raise CacheMissError("No cache record in memory")
        return self._record

    def write(self, metadata: Metadata) -> None:
        self._record = metadata
        self.writes += 1

    def is_fresh(self, metadata: Metadata, now: float) -> bool:
        return is_fresh(metadata, now, self._ttl_s)


def _coerce_record(data: Any, path: Path) -> Metadata:
    """Validate an untyped JSON value as a complete cache record."""
    if not isinstance(data, dict):
        raise CacheCorruptError(f"Cache record at {path} is not a JSON object")

    def _field(name: str, expected: type | tuple[type, ...]) -> Any:
        value = data.get(name)
        if isinstance(value, bool) or not isinstance(value, expected):
            raise CacheCorruptError(f"Cache record at {path} has invalid '{name}'")
        return value

    try:
        timestamp = float(_field("timestamp", (int, float)))
    except OverflowError as exc:
        raise CacheCorruptError(
            f"Cache record at {path} has out-of-range 'timestamp'"
        ) from exc
    if not math.isfinite(timestamp):
        raise CacheCorruptError(f"Cache record at {path} has invalid 'timestamp'")
    return Metadata(
        title=_field("title", str),
        artist=_field("artist", str),
        length=_field("length", int),
        position=_field("position", int),
        timestamp=timestamp,
    )
