from __future__ import annotations
from typing import Dict, Mapping, NamedTuple, Optional, Tuple
from .models import (
    EmotionVector, DerivedParameters, EMOTIONS, DOMINANCE_PRIORITY, clamp,
)

# Rule-based classifier: DerivedParameters (0..100 sliders) -> EmotionVector.
# - Each non-neutral emotion is a fixed linear combination of (energy, calmness, tension).
# - neutral = 100 - max(energy, calmness, tension).
# - Raw scores are clamped to [0,100], scaled to [0,1], then renormalized to sum to 1.
# - No intercepts: an all-zero input yields a pure neutral vector.

# emotion -> (energy_w, calmness_w, tension_w)
EMOTION_WEIGHTS: Dict[str, Tuple[float, float, float]] = {
    "joy":         ( 0.7,  0.3, -0.5),
    "sadness":     (-0.5, -0.1,  0.6),
    "anger":       ( 0.4, -0.6,  0.7),
    "fear":        (-0.1, -0.5,  0.8),
    "surprise":    ( 0.6, -0.2,  0.3),
    "disgust":     ( 0.1, -0.4,  0.5),
    "contentment": (-0.2,  0.8, -0.4),
}

INTENSITY_ENERGY_WEIGHT = 0.6
INTENSITY_DOMINANT_WEIGHT = 0.4


class Classification(NamedTuple):
    emotions: EmotionVector
    dominant_emotion: str
    confidence: float
    intensity: float


def dominant_of(scores: Mapping[str, float]) -> Optional[str]:
    """Key with the highest score; ties resolved by DOMINANCE_PRIORITY.

    Keys outside the emotion schema are ignored. Returns None for an empty map.
    """
    best: Optional[str] = None
    best_score = 0.0
    for k in DOMINANCE_PRIORITY:
        if k not in scores:
            continue
        v = scores[k]
        if best is None or v > best_score:
            best, best_score = k, v
    return best


def raw_scores(derived: DerivedParameters) -> Dict[str, float]:
    """Unnormalized per-emotion scores in [0,1] (not summing to 1)."""
    e = clamp(derived.energy, 0.0, 100.0)
    c = clamp(derived.calmness, 0.0, 100.0)
    t = clamp(derived.tension, 0.0, 100.0)
    out: Dict[str, float] = {}
    for k in EMOTIONS:
        if k == "neutral":
            out[k] = clamp(100.0 - max(e, c, t), 0.0, 100.0) / 100.0
            continue
        we, wc, wt = EMOTION_WEIGHTS[k]
        out[k] = clamp(we * e + wc * c + wt * t, 0.0, 100.0) / 100.0
    return out


def classify(derived: DerivedParameters) -> Classification:
    scores = raw_scores(derived)
    total = sum(scores.values())
    if total <= 0:
        emotions = EmotionVector.neutral_only()
        normalized = emotions.to_dict()
    else:
        normalized = {k: scores[k] / total for k in EMOTIONS}
        emotions = EmotionVector.from_dict(normalized)

    dominant = dominant_of(normalized) or "neutral"
    dominant_score = normalized[dominant]
    norm_total = sum(normalized.values())
    confidence = clamp(dominant_score / norm_total, 0.0, 1.0) if norm_total > 0 else 0.0
    energy = clamp(derived.energy, 0.0, 100.0)
    intensity = clamp(
        energy * INTENSITY_ENERGY_WEIGHT + dominant_score * 100.0 * INTENSITY_DOMINANT_WEIGHT,
        0.0, 100.0,
    )
    return Classification(emotions=emotions, dominant_emotion=dominant, confidence=confidence, intensity=intensity)


# --------------- Description ---------------

_DESCRIPTIONS = {
    "joy": "You are feeling {level} happy and joyful.",
    "sadness": "You are feeling {level} sad.",
    "anger": "You are feeling {level} angry.",
    "fear": "You are feeling {level} afraid or anxious.",
    "surprise": "You are feeling {level} surprised.",
    "disgust": "You are feeling {level} disgusted.",
    "contentment": "You are feeling {level} content and at ease.",
}


def _confidence_level(confidence: float) -> str:
    if confidence > 0.7:
        return "extremely"
    if confidence > 0.5:
        return "very"
    if confidence > 0.3:
        return "moderately"
    return "slightly"


def describe(result: Classification) -> str:
    template = _DESCRIPTIONS.get(result.dominant_emotion)
    if template is None:
        return "Your emotional state appears to be neutral."
    return template.format(level=_confidence_level(result.confidence))
