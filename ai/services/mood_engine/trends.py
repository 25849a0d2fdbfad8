"""Trend aggregation over a history of mood entries.

``aggregate`` is the single entry point: it filters the history to a rolling
window, then builds the frequency tables, the sparse per-day series and the
calendar distributions. The week-over-week comparison is computed from the
full history with fixed 7-day buckets, independent of the window.
"""

from __future__ import annotations

import logging
import time
from datetime import tzinfo
from typing import Dict, Iterable, List, Optional

from . import config
from .daily import (
    build_daily_series,
    count_by_date,
    count_day_of_week,
    count_sources,
    count_time_of_day,
)
from .models import (
    AggregateResult,
    AggregateWindow,
    EMOTIONS,
    DERIVED_KEYS,
    MoodEntry,
    TrendLine,
)
from .observability import timed
from .weekly import DAY_MS, build_weekly_comparison

logger = logging.getLogger("mood_engine.trends")

TREND_STYLE = {
    "energy": ("Energy", "#3498db"),
    "calmness": ("Calmness", "#2ecc71"),
    "tension": ("Tension", "#e74c3c"),
}


def chronological(entries: Iterable[MoodEntry]) -> List[MoodEntry]:
    """New list ordered by (timestamp, id) with derived values clamped to [0,100].

    The input is left untouched; out-of-range entries are replaced by clamped copies.
    """
    return sorted((e.clamped() for e in entries), key=lambda e: (e.timestamp, e.id))


def make_window(window_days: int, now_ms: int) -> AggregateWindow:
    days = max(0, int(window_days))
    return AggregateWindow(days=days, start_ms=now_ms - days * DAY_MS, end_ms=now_ms)


def filter_window(entries: Iterable[MoodEntry], window: AggregateWindow) -> List[MoodEntry]:
    return chronological(e for e in entries if window.contains(e.timestamp))


def count_emotions(entries: List[MoodEntry]) -> Dict[str, int]:
    counts = {k: 0 for k in EMOTIONS}
    for e in entries:
        if e.dominant_emotion in counts:
            counts[e.dominant_emotion] += 1
    return counts


def _averages(entries: List[MoodEntry]) -> Dict[str, float]:
    if not entries:
        return {k: 0.0 for k in DERIVED_KEYS}
    n = len(entries)
    return {k: sum(getattr(e.derived, k) for e in entries) / n for k in DERIVED_KEYS}


def _entry_trends(entries: List[MoodEntry]) -> Dict[str, TrendLine]:
    return {
        k: TrendLine(label=label, color=color, data=[getattr(e.derived, k) for e in entries])
        for k, (label, color) in TREND_STYLE.items()
    }


def aggregate(
    entries: List[MoodEntry],
    window_days: Optional[int] = None,
    now_ms: Optional[int] = None,
    tz: Optional[tzinfo] = None,
) -> AggregateResult:
    """Aggregate ``entries`` over ``[now - window_days, now]``.

    Never raises for empty or degenerate input: an empty history yields zero
    counts everywhere and empty series. The result is freshly allocated and
    depends only on the arguments.
    """
    if window_days is None:
        window_days = config.DEFAULT_WINDOW_DAYS
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    if tz is None:
        tz = config.resolve_tz()

    with timed(logger, "aggregate_complete") as stats:
        history = chronological(entries)
        window = make_window(window_days, now_ms)
        recent = [e for e in history if window.contains(e.timestamp)]

        result = AggregateResult(
            window=window,
            entry_count=len(recent),
            emotion_frequency=count_emotions(recent),
            daily_series=build_daily_series(recent, tz),
            time_of_day_counts=count_time_of_day(recent, tz),
            day_of_week_counts=count_day_of_week(recent, tz),
            weekly_comparison=build_weekly_comparison(history, now_ms),
            daily_counts=count_by_date(recent, tz),
            source_counts=count_sources(recent),
            averages=_averages(recent),
            entry_trends=_entry_trends(recent),
        )
        stats.update(
            window_days=window.days,
            history=len(history),
            in_window=len(recent),
            days=len(result.daily_series.dates),
        )
    return result
