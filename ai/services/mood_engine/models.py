from __future__ import annotations
from dataclasses import dataclass, field, asdict, replace
from typing import List, Dict, Optional, Any
import math

# Schema order. Every emotion-keyed map is built over this list.
EMOTIONS = ["joy", "sadness", "anger", "fear", "surprise", "disgust", "contentment", "neutral"]

# Tie-break order for "dominant emotion": first in this list wins.
DOMINANCE_PRIORITY = ["joy", "contentment", "surprise", "neutral", "fear", "disgust", "sadness", "anger"]

POSITIVE_EMOTIONS = {"joy", "contentment"}
NEGATIVE_EMOTIONS = {"sadness", "anger", "fear", "disgust"}

SOURCES = ["sliders", "drawing", "voice", "face"]

TIME_OF_DAY_BANDS = ["morning", "afternoon", "evening", "night"]
WEEKDAYS = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]

DERIVED_KEYS = ["energy", "calmness", "tension"]

NORMALIZED_TOLERANCE = 1e-6


def clamp(value: float, low: float, high: float) -> float:
    """Clamp to [low, high]. NaN maps to ``low``; infinities to the nearest bound."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(v):
        return low
    if v < low:
        return low
    if v > high:
        return high
    return v


@dataclass(frozen=True)
class EmotionVector:
    joy: float = 0.0
    sadness: float = 0.0
    anger: float = 0.0
    fear: float = 0.0
    surprise: float = 0.0
    disgust: float = 0.0
    contentment: float = 0.0
    neutral: float = 0.0

    @classmethod
    def from_dict(cls, scores: Dict[str, float]) -> "EmotionVector":
        return cls(**{k: float(scores.get(k, 0.0)) for k in EMOTIONS})

    @classmethod
    def neutral_only(cls) -> "EmotionVector":
        return cls(neutral=1.0)

    def score(self, emotion: str) -> float:
        return getattr(self, emotion)

    def total(self) -> float:
        return sum(getattr(self, k) for k in EMOTIONS)

    def is_normalized(self) -> bool:
        return abs(self.total() - 1.0) <= NORMALIZED_TOLERANCE

    def to_dict(self) -> Dict[str, float]:
        return {k: getattr(self, k) for k in EMOTIONS}


@dataclass(frozen=True)
class DerivedParameters:
    energy: float = 50.0
    calmness: float = 50.0
    tension: float = 50.0

    @classmethod
    def clamped(cls, energy: float, calmness: float, tension: float) -> "DerivedParameters":
        return cls(
            energy=clamp(energy, 0.0, 100.0),
            calmness=clamp(calmness, 0.0, 100.0),
            tension=clamp(tension, 0.0, 100.0),
        )

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class MoodEntry:
    id: str
    timestamp: int  # epoch milliseconds
    emotions: EmotionVector
    derived: DerivedParameters
    dominant_emotion: str  # one of EMOTIONS
    confidence: float
    source: str  # one of SOURCES
    notes: Optional[str] = None

    def clamped(self) -> "MoodEntry":
        """Copy with derived values in [0,100] and confidence in [0,1]; self when already in range."""
        derived = DerivedParameters.clamped(self.derived.energy, self.derived.calmness, self.derived.tension)
        confidence = clamp(self.confidence, 0.0, 1.0)
        if derived == self.derived and confidence == self.confidence:
            return self
        return replace(self, derived=derived, confidence=confidence)

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "timestamp": self.timestamp,
            "emotions": self.emotions.to_dict(),
            "derived": self.derived.to_dict(),
            "dominantEmotion": self.dominant_emotion,
            "confidence": self.confidence,
            "source": self.source,
        }
        if self.notes is not None:
            d["notes"] = self.notes
        return d


@dataclass
class DailySeries:
    dates: List[str] = field(default_factory=list)
    per_emotion_percent: Dict[str, List[float]] = field(default_factory=lambda: {k: [] for k in EMOTIONS})
    energy: List[float] = field(default_factory=list)
    calmness: List[float] = field(default_factory=list)
    tension: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dates": list(self.dates),
            "perEmotionPercent": {k: list(v) for k, v in self.per_emotion_percent.items()},
            "energy": list(self.energy),
            "calmness": list(self.calmness),
            "tension": list(self.tension),
        }


@dataclass
class WeeklyBucket:
    dominant_emotion: Optional[str]
    count: int
    mean_energy: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dominantEmotion": self.dominant_emotion,
            "count": self.count,
            "meanEnergy": self.mean_energy,
        }


@dataclass
class WeeklyComparison:
    this_week: WeeklyBucket
    previous_week: WeeklyBucket
    change_percent: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "thisWeek": self.this_week.to_dict(),
            "previousWeek": self.previous_week.to_dict(),
            "changePercent": self.change_percent,
        }


@dataclass
class TrendLine:
    label: str
    color: str
    data: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AggregateWindow:
    days: int
    start_ms: int
    end_ms: int

    def contains(self, timestamp_ms: int) -> bool:
        return self.start_ms <= timestamp_ms <= self.end_ms

    def to_dict(self) -> Dict[str, int]:
        return {"days": self.days, "startMs": self.start_ms, "endMs": self.end_ms}


@dataclass
class AggregateResult:
    window: AggregateWindow
    entry_count: int
    emotion_frequency: Dict[str, int]
    daily_series: DailySeries
    time_of_day_counts: Dict[str, int]
    day_of_week_counts: Dict[str, int]
    weekly_comparison: WeeklyComparison
    daily_counts: Dict[str, int] = field(default_factory=dict)
    source_counts: Dict[str, int] = field(default_factory=lambda: {k: 0 for k in SOURCES})
    averages: Dict[str, float] = field(default_factory=lambda: {k: 0.0 for k in DERIVED_KEYS})
    entry_trends: Dict[str, TrendLine] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window": self.window.to_dict(),
            "entryCount": self.entry_count,
            "emotionFrequency": dict(self.emotion_frequency),
            "dailySeries": self.daily_series.to_dict(),
            "timeOfDayCounts": dict(self.time_of_day_counts),
            "dayOfWeekCounts": dict(self.day_of_week_counts),
            "weeklyComparison": self.weekly_comparison.to_dict(),
            "dailyCounts": dict(self.daily_counts),
            "sourceCounts": dict(self.source_counts),
            "averages": dict(self.averages),
            "entryTrends": {k: v.to_dict() for k, v in self.entry_trends.items()},
        }


@dataclass(frozen=True)
class Insight:
    polarity: str  # "positive" | "neutral" | "negative"
    text: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
