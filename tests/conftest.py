"""Test configuration."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from spotify_manage.models import Metadata  # noqa: E402


class FakeClock:
    """Manually advanced wall clock in epoch seconds."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def track_metadata() -> dict[str, object]:
    """MPRIS metadata mapping as pydbus unpacks it."""
    return {
        "mpris:trackid": "/org/mpris/MediaPlayer2/Track/1",
        "xesam:title": "One More Time",
        "xesam:artist": ["Daft Punk"],
        "xesam:album": "Discovery",
        "mpris:length": 200_000,
    }


def _make_metadata(**overrides: object) -> Metadata:
    fields: dict[str, object] = {
        "title": "One More Time",
        "artist": "Daft Punk",
        "length": 200_000,
        "position": 50_000,
        "timestamp": 1_700_000_000.0,
    }
    fields.update(overrides)
    return Metadata(**fields)  # type: ignore[arg-type]


@pytest.fixture
def make_metadata():
    """Factory for complete `Metadata` records with per-test overrides."""
    return _make_metadata
