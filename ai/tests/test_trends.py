"""Tests for trend aggregation."""

import json
from datetime import timedelta, timezone

import pytest

from conftest import DAY_MS, NOW, UTC, make_entry, ms
from mood_engine.models import EMOTIONS, TIME_OF_DAY_BANDS, WEEKDAYS
from mood_engine.trends import aggregate


def test_empty_history_yields_zeroes():
    result = aggregate([], 30, now_ms=NOW, tz=UTC)

    assert result.entry_count == 0
    assert list(result.emotion_frequency) == EMOTIONS
    assert all(v == 0 for v in result.emotion_frequency.values())
    assert result.daily_series.dates == []
    assert result.daily_series.energy == []
    assert all(v == [] for v in result.daily_series.per_emotion_percent.values())
    assert list(result.time_of_day_counts) == TIME_OF_DAY_BANDS
    assert list(result.day_of_week_counts) == WEEKDAYS
    assert sum(result.time_of_day_counts.values()) == 0
    assert sum(result.day_of_week_counts.values()) == 0
    assert result.weekly_comparison.this_week.count == 0
    assert result.weekly_comparison.this_week.dominant_emotion is None
    assert result.weekly_comparison.change_percent == 0
    assert result.averages == {"energy": 0.0, "calmness": 0.0, "tension": 0.0}


def test_frequency_counts_only_entries_in_window():
    entries = [
        make_entry(NOW - 1 * DAY_MS, "joy"),
        make_entry(NOW - 2 * DAY_MS, "sadness"),
        make_entry(NOW - 2 * DAY_MS, "joy"),
        make_entry(NOW - 10 * DAY_MS, "anger"),
        make_entry(NOW - 40 * DAY_MS, "fear"),
    ]
    result = aggregate(entries, 7, now_ms=NOW, tz=UTC)

    assert sum(result.emotion_frequency.values()) == 3
    assert result.entry_count == 3
    assert result.emotion_frequency["joy"] == 2
    assert result.emotion_frequency["sadness"] == 1
    assert result.emotion_frequency["anger"] == 0


def test_window_bounds_are_inclusive_and_exclude_future():
    entries = [
        make_entry(NOW - 7 * DAY_MS, "joy"),
        make_entry(NOW, "sadness"),
        make_entry(NOW + 1, "anger"),
        make_entry(NOW - 7 * DAY_MS - 1, "fear"),
    ]
    result = aggregate(entries, 7, now_ms=NOW, tz=UTC)

    assert result.entry_count == 2
    assert result.window.start_ms == NOW - 7 * DAY_MS
    assert result.window.end_ms == NOW


def test_daily_series_is_sorted_sparse_and_averaged():
    entries = [
        make_entry(ms(2025, 10, 15, 9), "joy", energy=80, calmness=40, tension=10),
        make_entry(ms(2025, 10, 13, 8), "sadness", energy=20),
        make_entry(ms(2025, 10, 15, 10), "joy", energy=60, calmness=60, tension=30),
        make_entry(ms(2025, 10, 15, 11), "sadness", energy=40, calmness=20, tension=20),
    ]
    series = aggregate(entries, 7, now_ms=NOW, tz=UTC).daily_series

    assert series.dates == ["2025-10-13", "2025-10-15"]
    assert series.energy == [pytest.approx(20.0), pytest.approx(60.0)]
    assert series.calmness == [pytest.approx(50.0), pytest.approx(40.0)]
    assert series.tension == [pytest.approx(50.0), pytest.approx(20.0)]
    assert series.per_emotion_percent["joy"] == [0.0, 66.7]
    assert series.per_emotion_percent["sadness"] == [100.0, 33.3]
    assert series.per_emotion_percent["neutral"] == [0.0, 0.0]


@pytest.mark.parametrize(
    "hour, band",
    [(5, "morning"), (11, "morning"), (12, "afternoon"), (16, "afternoon"),
     (17, "evening"), (21, "evening"), (22, "night"), (0, "night"), (4, "night")],
)
def test_time_of_day_bands(hour, band):
    result = aggregate([make_entry(ms(2025, 10, 14, hour))], 7, now_ms=NOW, tz=UTC)

    assert result.time_of_day_counts[band] == 1
    assert sum(result.time_of_day_counts.values()) == 1


def test_day_of_week_is_sunday_first():
    entries = [
        make_entry(ms(2025, 10, 12)),  # Sunday
        make_entry(ms(2025, 10, 15, 8)),  # Wednesday
        make_entry(ms(2025, 10, 15, 9)),
    ]
    counts = aggregate(entries, 7, now_ms=NOW, tz=UTC).day_of_week_counts

    assert list(counts)[0] == "sunday"
    assert counts["sunday"] == 1
    assert counts["wednesday"] == 2
    assert counts["monday"] == 0


def test_local_timezone_shifts_date_and_band():
    jst = timezone(timedelta(hours=9))
    entry = make_entry(ms(2025, 10, 14, 23, 30))  # 08:30 on the 15th in JST
    result = aggregate([entry], 7, now_ms=NOW, tz=jst)

    assert result.daily_series.dates == ["2025-10-15"]
    assert result.time_of_day_counts["morning"] == 1
    assert result.day_of_week_counts["wednesday"] == 1


def test_weekly_change_percent_formula():
    entries = [
        make_entry(NOW - 1 * DAY_MS, "joy", energy=70),
        make_entry(NOW - 2 * DAY_MS, "joy", energy=90),
        make_entry(NOW - 8 * DAY_MS, "sadness", energy=60),
    ]
    weekly = aggregate(entries, 30, now_ms=NOW, tz=UTC).weekly_comparison

    assert weekly.this_week.count == 2
    assert weekly.this_week.mean_energy == pytest.approx(80.0)
    assert weekly.this_week.dominant_emotion == "joy"
    assert weekly.previous_week.count == 1
    assert weekly.previous_week.mean_energy == pytest.approx(60.0)
    assert weekly.previous_week.dominant_emotion == "sadness"
    assert weekly.change_percent == 33.3


def test_weekly_change_is_zero_without_previous_week():
    entries = [make_entry(NOW - DAY_MS, energy=90)]
    weekly = aggregate(entries, 7, now_ms=NOW, tz=UTC).weekly_comparison

    assert weekly.previous_week.count == 0
    assert weekly.change_percent == 0


def test_weekly_comparison_ignores_window():
    entries = [
        make_entry(NOW - 3 * DAY_MS, energy=50),
        make_entry(NOW - 9 * DAY_MS, energy=100),
    ]
    result = aggregate(entries, 1, now_ms=NOW, tz=UTC)

    assert result.entry_count == 0
    assert result.weekly_comparison.this_week.count == 1
    assert result.weekly_comparison.previous_week.count == 1
    assert result.weekly_comparison.change_percent == -50.0


def test_weekly_mode_tie_uses_priority():
    entries = [
        make_entry(NOW - DAY_MS, "anger"),
        make_entry(NOW - 2 * DAY_MS, "joy"),
    ]
    weekly = aggregate(entries, 7, now_ms=NOW, tz=UTC).weekly_comparison

    assert weekly.this_week.dominant_emotion == "joy"


def test_supplemental_counts_and_trends():
    entries = [
        make_entry(ms(2025, 10, 14, 9), energy=30, calmness=60, tension=10, source="voice"),
        make_entry(ms(2025, 10, 14, 20), energy=50, calmness=40, tension=30, source="face"),
        make_entry(ms(2025, 10, 15, 9), energy=70, calmness=20, tension=50, source="face"),
    ]
    result = aggregate(entries, 7, now_ms=NOW, tz=UTC)

    assert result.daily_counts == {"2025-10-14": 2, "2025-10-15": 1}
    assert result.source_counts == {"sliders": 0, "drawing": 0, "voice": 1, "face": 2}
    assert result.averages["energy"] == pytest.approx(50.0)
    assert result.entry_trends["energy"].data == [30, 50, 70]
    assert result.entry_trends["calmness"].label == "Calmness"


def test_aggregate_is_deterministic_and_does_not_mutate_input():
    entries = [
        make_entry(NOW - 3 * DAY_MS, "fear", energy=33.3),
        make_entry(NOW - 1 * DAY_MS, "joy", energy=66.6),
        make_entry(NOW - 9 * DAY_MS, "anger", energy=10),
    ]
    snapshot = list(entries)

    first = aggregate(entries, 7, now_ms=NOW, tz=UTC).to_dict()
    second = aggregate(entries, 7, now_ms=NOW, tz=UTC).to_dict()

    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)
    assert entries == snapshot


def test_to_dict_uses_stable_camel_case_keys():
    d = aggregate([make_entry(NOW - DAY_MS)], 7, now_ms=NOW, tz=UTC).to_dict()

    assert {"emotionFrequency", "dailySeries", "timeOfDayCounts", "dayOfWeekCounts", "weeklyComparison"} <= set(d)
    assert set(d["dailySeries"]) == {"dates", "perEmotionPercent", "energy", "calmness", "tension"}
    assert set(d["weeklyComparison"]) == {"thisWeek", "previousWeek", "changePercent"}
    assert set(d["weeklyComparison"]["thisWeek"]) == {"dominantEmotion", "count", "meanEnergy"}
    json.dumps(d)


def test_out_of_range_derived_values_are_clamped():
    raw = make_entry(NOW - 1 * DAY_MS, energy=250, calmness=-40, tension=50)
    entries = [make_entry(NOW - 2 * DAY_MS, energy=50, calmness=50, tension=50), raw]

    result = aggregate(entries, 7, now_ms=NOW, tz=UTC)

    assert result.daily_series.energy == [pytest.approx(50.0), pytest.approx(100.0)]
    assert result.daily_series.calmness == [pytest.approx(50.0), pytest.approx(0.0)]
    assert result.weekly_comparison.this_week.mean_energy == pytest.approx(75.0)
    assert result.averages["energy"] == pytest.approx(75.0)
    assert result.averages["calmness"] == pytest.approx(25.0)
    assert result.entry_trends["energy"].data == [50, 100]
    assert result.entry_trends["calmness"].data == [50, 0]
    # the caller's entry is left as given
    assert raw.derived.energy == 250
    assert raw.derived.calmness == -40


def test_nan_derived_values_never_reach_the_output():
    entries = [
        make_entry(NOW - 1 * DAY_MS, energy=80),
        make_entry(NOW - 9 * DAY_MS, energy=float("nan"), calmness=float("nan")),
    ]

    result = aggregate(entries, 30, now_ms=NOW, tz=UTC)
    weekly = result.weekly_comparison

    assert weekly.previous_week.count == 1
    assert weekly.previous_week.mean_energy == 0.0
    assert weekly.change_percent == 0.0
    json.dumps(result.to_dict(), allow_nan=False)


def test_weekly_mode_is_none_without_schema_emotions():
    entries = [
        make_entry(NOW - DAY_MS, "energy"),
        make_entry(NOW - 2 * DAY_MS, "energy"),
    ]
    weekly = aggregate(entries, 7, now_ms=NOW, tz=UTC).weekly_comparison

    assert weekly.this_week.count == 2
    assert weekly.this_week.dominant_emotion is None
