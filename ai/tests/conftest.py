"""Shared fixtures: a fixed clock and a MoodEntry factory."""

from datetime import datetime, timezone

import pytest

from mood_engine.models import DerivedParameters, EmotionVector, MoodEntry

UTC = timezone.utc
DAY_MS = 24 * 60 * 60 * 1000

# Wednesday 2025-10-15 12:00 UTC
NOW_DT = datetime(2025, 10, 15, 12, 0, tzinfo=UTC)
NOW = int(NOW_DT.timestamp() * 1000)


def ms(year, month, day, hour=12, minute=0, tz=UTC):
    return int(datetime(year, month, day, hour, minute, tzinfo=tz).timestamp() * 1000)


_counter = {"n": 0}


def make_entry(timestamp, dominant="joy", energy=50.0, calmness=50.0, tension=50.0, source="sliders", entry_id=None, notes=None):
    _counter["n"] += 1
    return MoodEntry(
        id=entry_id or f"e{_counter['n']:04d}",
        timestamp=timestamp,
        emotions=EmotionVector.from_dict({dominant: 1.0}),
        derived=DerivedParameters(energy=energy, calmness=calmness, tension=tension),
        dominant_emotion=dominant,
        confidence=1.0,
        source=source,
        notes=notes,
    )


@pytest.fixture
def entry_factory():
    return make_entry
