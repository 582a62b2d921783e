"""
domain.models - Value objects for the mood journal.

These are immutable data containers with no business logic and no
dependencies on infrastructure (no LangChain, no SQLite, no HTTP).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

TRAIT_NAMES: tuple[str, ...] = (
    "anxiety",
    "depression",
    "stress",
    "happiness",
    "energy",
    "confidence",
)

MOOD_TAGS: tuple[str, ...] = (
    "Happy", "Sad", "Anxious", "Excited", "Tired",
    "Stressed", "Calm", "Frustrated", "Confident", "Lonely",
)

SUGGESTION_CATEGORIES: tuple[str, ...] = ("activities", "movies", "songs", "food")

TRAIT_MIDPOINT = 5


class MoodCategory(str, Enum):
    """Overall mood bucket, ordered from most positive to most negative."""
    VERY_HAPPY = "very_happy"
    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    VERY_SAD = "very_sad"


# ---------------------------------------------------------------------------
# Mental health traits
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MentalHealthTraits:
    """Six 0-10 scores inferred for a single entry."""
    anxiety: int = TRAIT_MIDPOINT
    depression: int = TRAIT_MIDPOINT
    stress: int = TRAIT_MIDPOINT
    happiness: int = TRAIT_MIDPOINT
    energy: int = TRAIT_MIDPOINT
    confidence: int = TRAIT_MIDPOINT

    @classmethod
    def midpoint(cls) -> MentalHealthTraits:
        return cls()

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in TRAIT_NAMES}


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SuggestionBundle:
    """Four short recommendation lists.

    Nominally up to three items per category; the limit is not enforced.
    """
    activities: list[str] = field(default_factory=list)
    movies: list[str] = field(default_factory=list)
    songs: list[str] = field(default_factory=list)
    food: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True when every category has at least one item."""
        return all(getattr(self, name) for name in SUGGESTION_CATEGORIES)

    @classmethod
    def empty(cls) -> SuggestionBundle:
        return cls()

    @classmethod
    def fallback(cls) -> SuggestionBundle:
        """Generic bundle used when the AI service cannot produce one."""
        return cls(
            activities=["Take a walk in nature", "Practice deep breathing", "Call a friend"],
            movies=["The Secret Life of Walter Mitty", "La La Land", "Inside Out"],
            songs=["Here Comes the Sun", "Don't Stop Believin'", "Happy"],
            food=["Dark chocolate", "Green tea", "Nuts and berries"],
        )

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> SuggestionBundle:
        data = data or {}
        return cls(**{
            name: [str(item) for item in (data.get(name) or [])]
            for name in SUGGESTION_CATEGORIES
        })

    def to_dict(self) -> dict[str, list[str]]:
        return {name: list(getattr(self, name)) for name in SUGGESTION_CATEGORIES}


# ---------------------------------------------------------------------------
# Mood analysis
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MoodAnalysis:
    """Structured mood judgment for one entry."""
    detailed_mood_description: str
    mood_description: str
    traits: MentalHealthTraits
    overall_mood: MoodCategory
    suggestions: Optional[SuggestionBundle] = None
    is_fallback: bool = False

    @classmethod
    def fallback(cls) -> MoodAnalysis:
        """Neutral judgment substituted when the AI service is unavailable."""
        return cls(
            detailed_mood_description=(
                "Unable to analyze mood at this time. "
                "The AI analysis could not be completed."
            ),
            mood_description="Unable to analyze mood at this time.",
            traits=MentalHealthTraits.midpoint(),
            overall_mood=MoodCategory.NEUTRAL,
            suggestions=None,
            is_fallback=True,
        )


# ---------------------------------------------------------------------------
# Decoding external responses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DecodeResult(Generic[T]):
    """Outcome of decoding an AI response: a validated value or an error.

    Exactly one of value / error is set.
    """
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> DecodeResult[T]:
        return cls(value=value)

    @classmethod
    def malformed(cls, error: str) -> DecodeResult[T]:
        return cls(error=error)
