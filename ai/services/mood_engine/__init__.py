from .models import (
    EMOTIONS, DOMINANCE_PRIORITY, SOURCES, TIME_OF_DAY_BANDS, WEEKDAYS,
    EmotionVector, DerivedParameters, MoodEntry, AggregateResult, Insight,
)
from .classifier import classify, describe, dominant_of, Classification, EMOTION_WEIGHTS
from .signals import analyze_text, apply_face_emotion, build_entry
from .trends import aggregate
from .insights import generate_insights, insights_to_dicts
from .schemas import MoodEntryPayload, parse_entries
from .loader import load_entries
from .cache import AggregateCache, cache_key
