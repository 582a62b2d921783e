"""
Pytest fixtures for the mood journal tests.

AI and image storage adapters are replaced by fakes with call counters;
everything else (SQLite, services, REST app) is the real thing, running
against a temporary database.
"""
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import pytest

# Ensure src/ is on sys.path so tests can import domain, application, etc.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from application.context import SessionContext
from application.dto import RegisterRequest
from domain.entities import ChatMessage, Entry
from domain.models import (
    DecodeResult,
    MentalHealthTraits,
    MoodAnalysis,
    MoodCategory,
    SuggestionBundle,
)
from factory import ServiceFactory
from infrastructure.config import Settings


# ============================================================================
# Fake AI adapters
# ============================================================================

CONTEXT_BUNDLE = SuggestionBundle(
    activities=["Evening journaling session"],
    movies=["Paddington 2"],
    songs=["Three Little Birds"],
    food=["Warm oatmeal with berries"],
)

ENTRY_BUNDLE = SuggestionBundle(
    activities=["Stretch"],
    movies=["Amelie"],
    songs=["Vienna"],
    food=["Banana"],
)


def make_analysis(caption: str = "", mood: MoodCategory = MoodCategory.HAPPY, **traits) -> MoodAnalysis:
    return MoodAnalysis(
        detailed_mood_description=f"You seem content while writing about {caption}.",
        mood_description="You look content. Your energy is steady.",
        traits=MentalHealthTraits(**traits),
        overall_mood=mood,
    )


class FakeMoodAnalyzer:
    """Returns a canned analysis derived from the caption."""

    def __init__(self, error: Optional[Exception] = None, malformed: bool = False):
        self.error = error
        self.malformed = malformed
        self.calls: list[dict] = []

    async def analyze(self, image, content_type, caption, tags, recent_entries):
        self.calls.append({
            "image": image,
            "content_type": content_type,
            "caption": caption,
            "tags": list(tags),
            "recent_entries": list(recent_entries),
        })
        if self.error is not None:
            raise self.error
        if self.malformed:
            return DecodeResult.malformed("invalid JSON: Expecting value at position 0")
        return DecodeResult.success(make_analysis(caption, happiness=8, energy=7))


class FakeSuggestionGenerator:
    """Counts calls; can be switched to raise or to return malformed output."""

    def __init__(self, error: Optional[Exception] = None, malformed: bool = False):
        self.error = error
        self.malformed = malformed
        self.context_bundle = CONTEXT_BUNDLE
        self.context_calls: list[list[Entry]] = []
        self.analysis_calls: list[tuple[MoodAnalysis, str]] = []

    async def for_context(self, recent_entries):
        self.context_calls.append(list(recent_entries))
        return self._result(self.context_bundle)

    async def for_analysis(self, analysis, caption):
        self.analysis_calls.append((analysis, caption))
        return self._result(ENTRY_BUNDLE)

    def _result(self, bundle):
        if self.error is not None:
            raise self.error
        if self.malformed:
            return DecodeResult.malformed("schema mismatch: activities: Input should be a valid list")
        return DecodeResult.success(bundle)


class FakeChatResponder:
    def __init__(self, reply: str = "That sounds like a good day.", error: Optional[Exception] = None):
        self.reply_text = reply
        self.error = error
        self.calls: list[dict] = []

    async def reply(self, message, recent_entries, history):
        self.calls.append({
            "message": message,
            "recent_entries": list(recent_entries),
            "history": list(history),
        })
        if self.error is not None:
            raise self.error
        return self.reply_text


class FakeImageStore:
    def __init__(self):
        self.saved: list[tuple[bytes, str, str]] = []
        self.deleted: list[str] = []

    async def save(self, data, filename, content_type):
        self.saved.append((data, filename, content_type))
        return f"http://testserver/uploads/{len(self.saved)}-{filename}"

    async def delete(self, url):
        self.deleted.append(url)


@dataclass
class Fakes:
    analyzer: FakeMoodAnalyzer = field(default_factory=FakeMoodAnalyzer)
    generator: FakeSuggestionGenerator = field(default_factory=FakeSuggestionGenerator)
    responder: FakeChatResponder = field(default_factory=FakeChatResponder)
    image_store: FakeImageStore = field(default_factory=FakeImageStore)


class FakeServiceFactory(ServiceFactory):
    """ServiceFactory with the AI and image adapters swapped for fakes."""

    def __init__(self, config: Settings, fakes: Fakes, use_real_image_store: bool = False):
        super().__init__(config)
        self.fakes = fakes
        self._use_real_image_store = use_real_image_store

    def _mood_analyzer(self):
        return self.fakes.analyzer

    def _suggestion_generator(self):
        return self.fakes.generator

    def _chat_responder(self):
        return self.fakes.responder

    def _image_store(self):
        if self._use_real_image_store:
            return super()._image_store()
        return self.fakes.image_store


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        project_root=tmp_path,
        db_path=str(tmp_path / "journal.db"),
        upload_dir=str(tmp_path / "uploads"),
        public_base_url="http://testserver",
        jwt_secret="test-secret",
        jwt_expiry_hours=1,
    )


@pytest.fixture
def fakes() -> Fakes:
    return Fakes()


@pytest.fixture
async def factory(settings, fakes) -> FakeServiceFactory:
    f = FakeServiceFactory(settings, fakes)
    await f.initialize()
    return f


async def _register(factory: ServiceFactory, email: str, name: str) -> SessionContext:
    token = await factory.create_authentication_service().register(
        RegisterRequest(email=email, password="secret123", name=name),
    )
    return SessionContext(user_id=token.user_id, email=token.email)


@pytest.fixture
async def alice(factory) -> SessionContext:
    return await _register(factory, "alice@example.com", "Alice")


@pytest.fixture
async def bob(factory) -> SessionContext:
    return await _register(factory, "bob@example.com", "Bob")


def make_entry(entry_id: int, description: str, caption: str = "caption", **traits) -> Entry:
    return Entry(
        id=entry_id,
        user_id=1,
        image_url=f"http://testserver/uploads/{entry_id}.jpg",
        caption=caption,
        detailed_mood_description=description,
        mood_description="short",
        traits=MentalHealthTraits(**traits),
        created_at=f"2025-01-{entry_id:02d}T10:00:00",
    )


def make_message(role: str, content: str) -> ChatMessage:
    return ChatMessage(user_id=1, role=role, content=content)
