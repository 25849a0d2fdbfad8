from __future__ import annotations
from typing import List, Dict
from collections import defaultdict
from datetime import datetime, tzinfo
from .models import MoodEntry, DailySeries, EMOTIONS, TIME_OF_DAY_BANDS, WEEKDAYS, SOURCES

# Per-day and calendar bucketing.
# Policy:
# - All buckets use the entry's local wall clock (caller-supplied tzinfo).
# - The daily series is sparse: dates without entries are absent, never zero-filled.
# - Count maps are zero-initialized over their fixed key lists so every key is present.


def local_datetime(timestamp_ms: int, tz: tzinfo) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=tz)


def local_date_key(timestamp_ms: int, tz: tzinfo) -> str:
    return local_datetime(timestamp_ms, tz).strftime("%Y-%m-%d")


def time_of_day_band(hour: int) -> str:
    # morning [5,12), afternoon [12,17), evening [17,22), night [22,24) + [0,5)
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 22:
        return "evening"
    return "night"


def weekday_name(dt: datetime) -> str:
    # datetime.weekday(): Monday=0 .. Sunday=6; WEEKDAYS is Sunday-first
    return WEEKDAYS[(dt.weekday() + 1) % 7]


def count_time_of_day(entries: List[MoodEntry], tz: tzinfo) -> Dict[str, int]:
    counts = {b: 0 for b in TIME_OF_DAY_BANDS}
    for e in entries:
        counts[time_of_day_band(local_datetime(e.timestamp, tz).hour)] += 1
    return counts


def count_day_of_week(entries: List[MoodEntry], tz: tzinfo) -> Dict[str, int]:
    counts = {d: 0 for d in WEEKDAYS}
    for e in entries:
        counts[weekday_name(local_datetime(e.timestamp, tz))] += 1
    return counts


def count_sources(entries: List[MoodEntry]) -> Dict[str, int]:
    counts = {s: 0 for s in SOURCES}
    for e in entries:
        if e.source in counts:
            counts[e.source] += 1
    return counts


def group_by_date(entries: List[MoodEntry], tz: tzinfo) -> Dict[str, List[MoodEntry]]:
    buckets: Dict[str, List[MoodEntry]] = defaultdict(list)
    for e in entries:
        buckets[local_date_key(e.timestamp, tz)].append(e)
    return dict(buckets)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def build_daily_series(entries: List[MoodEntry], tz: tzinfo) -> DailySeries:
    # Pre: entries sorted by timestamp asc
    series = DailySeries()
    for d, bucket in sorted(group_by_date(entries, tz).items()):
        n = len(bucket)
        series.dates.append(d)
        for k in EMOTIONS:
            hits = sum(1 for e in bucket if e.dominant_emotion == k)
            series.per_emotion_percent[k].append(round(hits / n * 100.0, 1))
        series.energy.append(_mean([e.derived.energy for e in bucket]))
        series.calmness.append(_mean([e.derived.calmness for e in bucket]))
        series.tension.append(_mean([e.derived.tension for e in bucket]))
    return series


def count_by_date(entries: List[MoodEntry], tz: tzinfo) -> Dict[str, int]:
    return {d: len(bucket) for d, bucket in sorted(group_by_date(entries, tz).items())}
