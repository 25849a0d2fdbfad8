from __future__ import annotations
from typing import Dict, List, Optional, Tuple
import time
import uuid
from .models import DerivedParameters, MoodEntry, SOURCES, clamp
from .classifier import classify

# Deterministic signal adapters. These stand in for the capture-side analyzers
# (keyword notes, face label) and only ever produce DerivedParameters; the
# classifier does the rest.

TEXT_KEYWORDS: Dict[str, List[str]] = {
    "joy": ["happy", "joy", "excited", "great", "wonderful", "love", "pleased"],
    "sadness": ["sad", "unhappy", "depressed", "down", "miserable", "upset"],
    "anger": ["angry", "mad", "furious", "annoyed", "irritated", "frustrated"],
    "fear": ["afraid", "scared", "fearful", "terrified", "anxious", "worried"],
    "surprise": ["surprised", "shocked", "amazed", "astonished", "unexpected"],
    "disgust": ["disgusted", "gross", "revolting", "awful", "horrible"],
    "contentment": ["content", "satisfied", "peaceful", "calm", "relaxed"],
}

# face label -> (energy, calmness, tension) modifiers before weighting
FACE_MODIFIERS: Dict[str, Tuple[float, float, float]] = {
    "happy": (20.0, 10.0, -15.0),
    "sad": (-20.0, -10.0, 10.0),
    "anger": (15.0, -20.0, 25.0),
    "fear": (10.0, -15.0, 20.0),
    "surprise": (15.0, 0.0, 10.0),
    "disgust": (5.0, -15.0, 15.0),
}
FACE_WEIGHT = 0.3


def keyword_shares(text: str) -> Dict[str, float]:
    """Share of keyword hits per emotion (empty when nothing matched).

    Each keyword counts once; matching is case-insensitive substring matching.
    """
    lowered = (text or "").lower()
    hits = {}
    for emotion, words in TEXT_KEYWORDS.items():
        n = sum(1 for w in words if w in lowered)
        if n > 0:
            hits[emotion] = n
    total = sum(hits.values())
    if total == 0:
        return {}
    return {k: v / total for k, v in hits.items()}


def analyze_text(text: str) -> DerivedParameters:
    shares = keyword_shares(text)
    if not shares:
        return DerivedParameters()
    joy, sadness, anger, fear, surprise, contentment = (
        shares.get(k, 0.0) for k in ("joy", "sadness", "anger", "fear", "surprise", "contentment")
    )
    return DerivedParameters.clamped(
        energy=50.0 + (joy + anger + surprise - sadness) * 25.0,
        calmness=50.0 + (contentment - anger - fear) * 25.0,
        tension=50.0 + (fear + anger - contentment) * 25.0,
    )


def apply_face_emotion(derived: DerivedParameters, face_label: Optional[str], weight: float = FACE_WEIGHT) -> DerivedParameters:
    mods = FACE_MODIFIERS.get((face_label or "").strip().lower())
    if mods is None:
        return DerivedParameters.clamped(derived.energy, derived.calmness, derived.tension)
    de, dc, dt = mods
    return DerivedParameters.clamped(
        energy=derived.energy + de * weight,
        calmness=derived.calmness + dc * weight,
        tension=derived.tension + dt * weight,
    )


def build_entry(
    derived: DerivedParameters,
    source: str = "sliders",
    *,
    entry_id: Optional[str] = None,
    timestamp_ms: Optional[int] = None,
    notes: Optional[str] = None,
) -> MoodEntry:
    """Classify ``derived`` and wrap the result in a new MoodEntry."""
    if source not in SOURCES:
        raise ValueError(f"Unknown source {source!r}. Expected one of: {', '.join(SOURCES)}")
    params = DerivedParameters.clamped(derived.energy, derived.calmness, derived.tension)
    result = classify(params)
    return MoodEntry(
        id=entry_id or str(uuid.uuid4()),
        timestamp=int(timestamp_ms) if timestamp_ms is not None else int(time.time() * 1000),
        emotions=result.emotions,
        derived=params,
        dominant_emotion=result.dominant_emotion,
        confidence=clamp(result.confidence, 0.0, 1.0),
        source=source,
        notes=notes,
    )
