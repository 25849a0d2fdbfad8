from __future__ import annotations
from typing import List, Dict, Optional, Tuple
from .models import MoodEntry, AggregateResult, Insight, POSITIVE_EMOTIONS, NEGATIVE_EMOTIONS
from .trends import filter_window

# Insight rules. Evaluated in a fixed order; each rule appends at most one
# Insight and never touches earlier ones. The output order is the rule order,
# not a severity ranking.

CALMNESS_TREND_MIN_ENTRIES = 3
CALMNESS_TREND_THRESHOLD = 5.0


def _first_max(counts: Dict[str, int]) -> Optional[Tuple[str, int]]:
    # first key (insertion order) holding the max count
    best: Optional[Tuple[str, int]] = None
    for k, v in counts.items():
        if best is None or v > best[1]:
            best = (k, v)
    return best


def _polarity_of(emotion: str) -> str:
    if emotion in POSITIVE_EMOTIONS:
        return "positive"
    if emotion in NEGATIVE_EMOTIONS:
        return "negative"
    return "neutral"


def most_frequent_emotion_insight(aggregate: AggregateResult) -> Optional[Insight]:
    top = _first_max(aggregate.emotion_frequency)
    if top is None or top[1] <= 0:
        return None
    emotion, count = top
    return Insight(
        polarity=_polarity_of(emotion),
        text=f"Your most frequent emotion was {emotion} ({count} times).",
    )


def time_of_day_insight(aggregate: AggregateResult) -> Optional[Insight]:
    top = _first_max(aggregate.time_of_day_counts)
    if top is None or top[1] <= 0:
        return None
    band, count = top
    return Insight(
        polarity="neutral",
        text=f"You recorded emotions most often during the {band} ({count} times).",
    )


def day_of_week_insight(aggregate: AggregateResult) -> Optional[Insight]:
    top = _first_max(aggregate.day_of_week_counts)
    if top is None or top[1] <= 0:
        return None
    day, _ = top
    return Insight(
        polarity="neutral",
        text=f"You recorded emotions most often on {day.capitalize()}s.",
    )


def calmness_trend_insight(entries: List[MoodEntry], aggregate: AggregateResult) -> Optional[Insight]:
    values = [e.derived.calmness for e in filter_window(entries, aggregate.window)]
    if len(values) < CALMNESS_TREND_MIN_ENTRIES:
        return None
    mid = len(values) // 2
    first, second = values[:mid], values[mid:]
    change = sum(second) / len(second) - sum(first) / len(first)
    if abs(change) <= CALMNESS_TREND_THRESHOLD:
        return None
    if change > 0:
        return Insight(polarity="positive", text="Your calmness levels have been increasing recently.")
    return Insight(polarity="negative", text="Your calmness levels have been decreasing recently.")


def generate_insights(entries: List[MoodEntry], aggregate: AggregateResult) -> List[Insight]:
    candidates = [
        most_frequent_emotion_insight(aggregate),
        time_of_day_insight(aggregate),
        day_of_week_insight(aggregate),
        calmness_trend_insight(entries, aggregate),
    ]
    return [i for i in candidates if i is not None]


def insights_to_dicts(insights: List[Insight]) -> List[Dict[str, str]]:
    return [i.to_dict() for i in insights]
