"""
application.dto - Data Transfer Objects for service input/output.

These are the structured values that services exchange with callers
(REST endpoints, CLI commands).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from domain.entities import Entry
from domain.models import SuggestionBundle


@dataclass(frozen=True)
class RegisterRequest:
    """Input for account registration."""
    email: str
    password: str
    name: str


@dataclass(frozen=True)
class LoginRequest:
    """Input for sign-in."""
    email: str
    password: str


@dataclass(frozen=True)
class AuthToken:
    """JWT token response after successful register/login."""
    access_token: str
    token_type: str = "bearer"
    user_id: int = 0
    email: str = ""
    name: str = ""


@dataclass(frozen=True)
class NewEntryRequest:
    """Input for creating a journal entry."""
    image: bytes
    filename: str
    content_type: str
    caption: str
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AnalyticsReport:
    """Read-time aggregation over all of an account's entries."""
    total_entries: int
    average_scores: dict[str, float]
    mood_distribution: dict[str, int]
    recent_trends: dict[str, list[int]]
    top_mood_descriptions: list[str]
    suggestions: SuggestionBundle
    entries: list[Entry]
