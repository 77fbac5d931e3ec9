"""Now-playing queries served from the cache slot or the player."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from spotify_manage.errors import (
    CacheCorruptError,
    CacheMissError,
    SpotifyManageError,
    ZeroLengthTrackError,
)
from spotify_manage.models import Metadata

from .cache_store import CacheStore
from .metadata_decoder import decode_metadata
from .player_proxy import PlayerProxy

logger = logging.getLogger(__name__)


class NowPlayingService:
    """Answers track/progress queries with as little bus traffic as possible.

    The player is opened lazily through `player_factory`, so a fresh cache hit
    never connects to the bus. Once opened, the same proxy is reused for the
    rest of the invocation.
    """

    def __init__(
        self,
        player_factory: Callable[[], PlayerProxy],
        cache: CacheStore,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._player_factory = player_factory
        self._cache = cache
        self._clock = clock
        self._player: PlayerProxy | None = None

    @property
    def player(self) -> PlayerProxy:
        if self._player is None:
            self._player = self._player_factory()
        return self._player

    def get_metadata(self) -> Metadata:
        """Return the cached record while fresh, otherwise fetch and cache anew."""
        cached = self._read_cache()
        if cached is not None and self._cache.is_fresh(cached, self._clock()):
            logger.debug("Now-playing cache hit for %r", cached.title)
            return cached

        player = self.player
        raw = player.get_metadata()
        position = player.get_position()
        metadata = decode_metadata(raw, position, now=self._clock())
        self._cache.write(metadata)
        logger.debug("Fetched now-playing record for %r", metadata.title)
        return metadata

    def get_song_progress(self) -> float:
        """Return playback progress as `position / length`."""
        metadata = self.get_metadata()
        if metadata.length == 0:
            raise ZeroLengthTrackError(
                f"Track {metadata.title!r} reports zero length"
            )
        return metadata.position / metadata.length

    def get_song_name(self) -> str:
        """Return `"{artist} - {title}"`, falling back to the last cached record.

        The fallback skips the freshness check: a stale name is preferred over
        no name. When the cache cannot supply one either, the original failure
        is raised.
        """
        try:
            metadata = self.get_metadata()
        except SpotifyManageError as exc:
            logger.warning("Now-playing query failed (%s); using cached name.", exc)
            metadata = self._last_cached(exc)
        return metadata.song_name

    def get_playback_status(self) -> str:
        return self.player.get_playback_status()

    def _last_cached(self, error: SpotifyManageError) -> Metadata:
        try:
            return self._cache.read()
        except SpotifyManageError as exc:
            logger.debug("No cached name to fall back on: %s", exc)
        raise error

    def _read_cache(self) -> Metadata | None:
        try:
            return self._cache.read()
        except CacheMissError:
            logger.debug("Now-playing cache empty")
        except CacheCorruptError as exc:
            logger.warning("Ignoring unreadable now-playing cache: %s", exc)
        return None
