"""Pydantic models for REST API request/response validation."""

from __future__ import annotations

from pydantic import BaseModel, Field

from domain.entities import Account, ChatMessage, Entry
from domain.models import SuggestionBundle
from application.dto import AnalyticsReport, AuthToken


# --- Auth ---

class RegisterBody(BaseModel):
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)


class LoginBody(BaseModel):
    email: str
    password: str


class RefreshBody(BaseModel):
    token: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    email: str
    name: str

    @classmethod
    def from_token(cls, token: AuthToken) -> TokenResponse:
        return cls(
            access_token=token.access_token,
            token_type=token.token_type,
            user_id=token.user_id,
            email=token.email,
            name=token.name,
        )


class AccountOut(BaseModel):
    id: int
    email: str
    name: str
    image: str
    created_at: str

    @classmethod
    def from_account(cls, account: Account) -> AccountOut:
        return cls(
            id=account.id,
            email=account.email,
            name=account.name,
            image=account.image,
            created_at=account.created_at,
        )


# --- Entries ---

class SuggestionsOut(BaseModel):
    activities: list[str] = []
    movies: list[str] = []
    songs: list[str] = []
    food: list[str] = []

    @classmethod
    def from_bundle(cls, bundle: SuggestionBundle) -> SuggestionsOut:
        return cls(**bundle.to_dict())


class TraitsOut(BaseModel):
    anxiety: int
    depression: int
    stress: int
    happiness: int
    energy: int
    confidence: int


class EntryOut(BaseModel):
    id: int
    image_url: str
    caption: str
    tags: list[str]
    mood_description: str
    detailed_mood_description: str
    mental_health_traits: TraitsOut
    overall_mood: str
    suggestions: SuggestionsOut | None = None
    created_at: str

    @classmethod
    def from_entry(cls, entry: Entry) -> EntryOut:
        return cls(
            id=entry.id,
            image_url=entry.image_url,
            caption=entry.caption,
            tags=list(entry.tags),
            mood_description=entry.mood_description,
            detailed_mood_description=entry.detailed_mood_description,
            mental_health_traits=TraitsOut(**entry.traits.to_dict()),
            overall_mood=entry.overall_mood.value,
            suggestions=(
                SuggestionsOut.from_bundle(entry.suggestions)
                if entry.suggestions is not None else None
            ),
            created_at=entry.created_at,
        )


# --- Analytics ---

class AnalyticsOut(BaseModel):
    total_entries: int
    average_scores: dict[str, float]
    mood_distribution: dict[str, int]
    recent_trends: dict[str, list[int]]
    top_mood_descriptions: list[str]
    suggestions: SuggestionsOut
    entries: list[EntryOut]

    @classmethod
    def from_report(cls, report: AnalyticsReport) -> AnalyticsOut:
        return cls(
            total_entries=report.total_entries,
            average_scores=report.average_scores,
            mood_distribution=report.mood_distribution,
            recent_trends=report.recent_trends,
            top_mood_descriptions=report.top_mood_descriptions,
            suggestions=SuggestionsOut.from_bundle(report.suggestions),
            entries=[EntryOut.from_entry(e) for e in report.entries],
        )


# --- Chat ---

class ChatBody(BaseModel):
    message: str = Field(..., min_length=1)


class MessageOut(BaseModel):
    id: int | None
    role: str
    content: str
    created_at: str

    @classmethod
    def from_message(cls, message: ChatMessage) -> MessageOut:
        return cls(
            id=message.id,
            role=message.role,
            content=message.content,
            created_at=message.created_at,
        )
