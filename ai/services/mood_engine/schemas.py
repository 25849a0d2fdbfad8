# -*- coding: utf-8 -*-
"""schemas.py

JSON boundary for MoodEntry records.

Accepted shapes
- current:  {"id", "timestamp", "emotions": {8 keys}, "derived": {energy, calmness, tension},
             "dominantEmotion", "confidence", "source", "notes"}
- app storage (legacy): {"id", "createdAt", "emotionData": {8 keys + energy/calmness/tension},
                         "analysis": {"dominantEmotion", "confidence"}}

Policy
- Out-of-range numbers are clamped, not rejected (emotions/confidence -> [0,1], derived -> [0,100]).
- Missing optional fields are defaulted; only a missing or non-numeric timestamp
  makes a record invalid.
"""

from __future__ import annotations

import math
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .classifier import dominant_of
from .models import (
    DERIVED_KEYS,
    EMOTIONS,
    SOURCES,
    DerivedParameters,
    EmotionVector,
    MoodEntry,
    clamp,
)


class EmotionsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    joy: float = 0.0
    sadness: float = 0.0
    anger: float = 0.0
    fear: float = 0.0
    surprise: float = 0.0
    disgust: float = 0.0
    contentment: float = 0.0
    neutral: float = 0.0

    @field_validator(*EMOTIONS, mode="after")
    @classmethod
    def _clamp_unit(cls, v: float) -> float:
        return clamp(v, 0.0, 1.0)

    def to_vector(self) -> EmotionVector:
        return EmotionVector.from_dict(self.model_dump())


class DerivedPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    energy: float = 50.0
    calmness: float = 50.0
    tension: float = 50.0

    @field_validator(*DERIVED_KEYS, mode="after")
    @classmethod
    def _clamp_percent(cls, v: float) -> float:
        return clamp(v, 0.0, 100.0)

    def to_params(self) -> DerivedParameters:
        return DerivedParameters.clamped(self.energy, self.calmness, self.tension)


class MoodEntryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: Optional[str] = None
    timestamp: int = Field(..., validation_alias=AliasChoices("timestamp", "createdAt"), description="epoch ms")
    emotions: Optional[EmotionsPayload] = Field(default=None, validation_alias=AliasChoices("emotions", "emotionData"))
    derived: Optional[DerivedPayload] = None
    dominant_emotion: Optional[str] = Field(default=None, validation_alias=AliasChoices("dominantEmotion", "dominant_emotion"))
    confidence: Optional[float] = None
    source: Optional[str] = None
    notes: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _lift_legacy_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        emotions = data.get("emotions", data.get("emotionData"))
        if data.get("derived") is None and isinstance(emotions, dict):
            lifted = {k: emotions[k] for k in DERIVED_KEYS if k in emotions}
            if lifted:
                data["derived"] = lifted
        analysis = data.get("analysis")
        if isinstance(analysis, dict):
            data.setdefault("dominantEmotion", analysis.get("dominantEmotion"))
            data.setdefault("confidence", analysis.get("confidence"))
        return data

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("timestamp must be epoch milliseconds")
        if isinstance(v, float):
            if not math.isfinite(v):
                raise ValueError("timestamp must be finite")
            return int(v)
        return v

    @field_validator("confidence", mode="after")
    @classmethod
    def _clamp_confidence(cls, v: Optional[float]) -> Optional[float]:
        return None if v is None else clamp(v, 0.0, 1.0)

    @field_validator("id", "notes", "source", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    def to_entry(self) -> MoodEntry:
        vector = self.emotions.to_vector() if self.emotions is not None else EmotionVector.neutral_only()
        derived = self.derived.to_params() if self.derived is not None else DerivedParameters()
        total = vector.total()

        dominant = self.dominant_emotion if self.dominant_emotion in EMOTIONS else None
        if dominant is None:
            dominant = dominant_of(vector.to_dict()) if total > 0 else "neutral"

        confidence = self.confidence
        if confidence is None:
            confidence = clamp(vector.score(dominant) / total, 0.0, 1.0) if total > 0 else 0.0

        return MoodEntry(
            id=self.id or str(uuid.uuid4()),
            timestamp=self.timestamp,
            emotions=vector,
            derived=derived,
            dominant_emotion=dominant,
            confidence=confidence,
            source=self.source if self.source in SOURCES else "sliders",
            notes=self.notes,
        )


def _error_text(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def parse_entry(row: Dict[str, Any]) -> MoodEntry:
    return MoodEntryPayload.model_validate(row).to_entry()


def parse_entries(rows: Sequence[Any]) -> Tuple[List[MoodEntry], List[Tuple[int, str]]]:
    """Validate ``rows``; returns (entries, [(index, error), ...]) with invalid rows skipped."""
    entries: List[MoodEntry] = []
    errors: List[Tuple[int, str]] = []
    for idx, row in enumerate(rows):
        try:
            entries.append(parse_entry(row))
        except ValidationError as exc:
            errors.append((idx, _error_text(exc)))
    return entries, errors
