"""
infrastructure.llm.json_decoding - Strict decoding of model JSON replies.

Models often wrap JSON in markdown fences. The payload is unwrapped,
parsed and validated against a pydantic schema. Malformed content is
reported as a DecodeResult error, never raised.
"""

from __future__ import annotations

import json
import re
from typing import Annotated, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from domain.models import (
    DecodeResult,
    MentalHealthTraits,
    MoodAnalysis,
    MoodCategory,
    SuggestionBundle,
)

M = TypeVar("M", bound=BaseModel)

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)

Score = Annotated[int, Field(ge=0, le=10)]


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class TraitsPayload(BaseModel):
    anxiety: Score
    depression: Score
    stress: Score
    happiness: Score
    energy: Score
    confidence: Score


class MoodAnalysisPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    detailed_mood_description: str = Field(alias="detailedMoodDescription", min_length=1)
    mood_description: str = Field(alias="moodDescription", min_length=1)
    mental_health_traits: TraitsPayload = Field(alias="mentalHealthTraits")
    overall_mood: MoodCategory = Field(alias="overallMood")

    def to_analysis(self) -> MoodAnalysis:
        return MoodAnalysis(
            detailed_mood_description=self.detailed_mood_description.strip(),
            mood_description=self.mood_description.strip(),
            traits=MentalHealthTraits(**self.mental_health_traits.model_dump()),
            overall_mood=self.overall_mood,
        )


class SuggestionPayload(BaseModel):
    activities: list[str] = Field(default_factory=list)
    movies: list[str] = Field(default_factory=list)
    songs: list[str] = Field(default_factory=list)
    food: list[str] = Field(default_factory=list)

    def to_bundle(self) -> SuggestionBundle:
        return SuggestionBundle.from_dict(self.model_dump())


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def strip_code_fence(text: str) -> str:
    """Remove surrounding whitespace and an optional ```json fence."""
    text = text.strip()
    match = _FENCE.match(text)
    return match.group(1) if match else text


def decode_json_payload(raw: str, schema: Type[M]) -> DecodeResult[M]:
    """Parse *raw* model output and validate it against *schema*."""
    if not raw or not raw.strip():
        return DecodeResult.malformed("empty response")

    body = strip_code_fence(raw)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        return DecodeResult.malformed(f"invalid JSON: {exc.msg} at position {exc.pos}")
    if not isinstance(data, dict):
        return DecodeResult.malformed(f"expected a JSON object, got {type(data).__name__}")

    try:
        return DecodeResult.success(schema.model_validate(data))
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in exc.errors()
        )
        return DecodeResult.malformed(f"schema mismatch: {problems}")


def decode_mood_analysis(raw: str) -> DecodeResult[MoodAnalysis]:
    result = decode_json_payload(raw, MoodAnalysisPayload)
    if not result.ok:
        return DecodeResult.malformed(result.error)
    return DecodeResult.success(result.value.to_analysis())


def decode_suggestions(raw: str) -> DecodeResult[SuggestionBundle]:
    result = decode_json_payload(raw, SuggestionPayload)
    if not result.ok:
        return DecodeResult.malformed(result.error)
    return DecodeResult.success(result.value.to_bundle())
