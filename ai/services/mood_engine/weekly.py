from __future__ import annotations
from typing import List, Dict, Optional, Tuple
from .models import MoodEntry, WeeklyBucket, WeeklyComparison, EMOTIONS
from .classifier import dominant_of

DAY_MS = 24 * 60 * 60 * 1000
WEEK_MS = 7 * DAY_MS


def _safe_div(a: float, b: float) -> float:
    if b == 0: return 0.0
    return a / b


def split_weeks(entries: List[MoodEntry], now_ms: int) -> Tuple[List[MoodEntry], List[MoodEntry]]:
    """(this_week, previous_week) using fixed 7-day buckets ending at ``now_ms``.

    this week:     now-7d  <= ts <= now
    previous week: now-14d <= ts <  now-7d
    """
    this_start = now_ms - WEEK_MS
    prev_start = now_ms - 2 * WEEK_MS
    this_week = [e for e in entries if this_start <= e.timestamp <= now_ms]
    previous_week = [e for e in entries if prev_start <= e.timestamp < this_start]
    return this_week, previous_week


def mode_emotion(entries: List[MoodEntry]) -> Optional[str]:
    if not entries:
        return None
    counts: Dict[str, int] = {k: 0 for k in EMOTIONS}
    for e in entries:
        if e.dominant_emotion in counts:
            counts[e.dominant_emotion] += 1
    # no schema emotion counted: no mode
    if max(counts.values()) == 0:
        return None
    return dominant_of(counts)


def build_bucket(entries: List[MoodEntry]) -> WeeklyBucket:
    n = len(entries)
    return WeeklyBucket(
        dominant_emotion=mode_emotion(entries),
        count=n,
        mean_energy=_safe_div(sum(e.derived.energy for e in entries), n),
    )


def change_percent(this_week: WeeklyBucket, previous_week: WeeklyBucket) -> float:
    # Undefined denominator (empty previous week or zero energy) -> 0
    if previous_week.count == 0 or previous_week.mean_energy == 0:
        return 0.0
    pct = (this_week.mean_energy - previous_week.mean_energy) / previous_week.mean_energy * 100.0
    return round(pct, 1)


def build_weekly_comparison(entries: List[MoodEntry], now_ms: int) -> WeeklyComparison:
    this_entries, prev_entries = split_weeks(entries, now_ms)
    this_week = build_bucket(this_entries)
    previous_week = build_bucket(prev_entries)
    return WeeklyComparison(
        this_week=this_week,
        previous_week=previous_week,
        change_percent=change_percent(this_week, previous_week),
    )
