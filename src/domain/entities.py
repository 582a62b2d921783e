"""
domain.entities - Persistence-aware types (have IDs, timestamps).

Decoupled from any persistence strategy: no SQL concerns, no DB imports.
Timestamps are set by the repository implementations, not by the entities
themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from domain.models import (
    MentalHealthTraits,
    MoodCategory,
    SuggestionBundle,
)


@dataclass
class Account:
    """A registered user."""
    id: Optional[int] = None
    email: str = ""
    name: str = ""
    password_hash: str = ""
    image: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass
class Entry:
    """One journal submission with its AI mood judgment."""
    id: Optional[int] = None
    user_id: Optional[int] = None
    image_url: str = ""
    caption: str = ""
    tags: list[str] = field(default_factory=list)
    mood_description: str = ""
    detailed_mood_description: str = ""
    traits: MentalHealthTraits = field(default_factory=MentalHealthTraits)
    overall_mood: MoodCategory = MoodCategory.NEUTRAL
    suggestions: Optional[SuggestionBundle] = None
    created_at: str = ""


@dataclass
class ChatMessage:
    """A single message in a user's chat log."""
    id: Optional[int] = None
    user_id: Optional[int] = None
    role: str = ""  # "user" or "assistant"
    content: str = ""
    created_at: str = ""


@dataclass
class CachedSuggestions:
    """Suggestion cache record for one account."""
    user_id: int
    fingerprint: Optional[str] = None
    suggestions: Optional[SuggestionBundle] = None
    updated_at: str = ""
