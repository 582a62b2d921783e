"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations. Application services depend only
on these protocols, never on concrete classes.

Using typing.Protocol (structural typing) instead of ABC: any class that
implements the methods satisfies the port without explicit inheritance.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from domain.models import DecodeResult, MoodAnalysis, SuggestionBundle
from domain.entities import Account, CachedSuggestions, ChatMessage, Entry


# ---------------------------------------------------------------------------
# AI Component Ports
# ---------------------------------------------------------------------------

@runtime_checkable
class MoodAnalyzerPort(Protocol):
    """Turn an image + caption + tags + prior entries into a mood judgment.

    Transport failures raise; malformed model output is reported through
    the returned DecodeResult.
    """

    async def analyze(
        self,
        image: bytes,
        content_type: str,
        caption: str,
        tags: list[str],
        recent_entries: list[Entry],
    ) -> DecodeResult[MoodAnalysis]: ...


@runtime_checkable
class SuggestionGeneratorPort(Protocol):
    """Generate suggestion bundles from journaling context."""

    async def for_context(
        self, recent_entries: list[Entry],
    ) -> DecodeResult[SuggestionBundle]: ...

    async def for_analysis(
        self, analysis: MoodAnalysis, caption: str,
    ) -> DecodeResult[SuggestionBundle]: ...


@runtime_checkable
class ChatResponderPort(Protocol):
    """Produce a free-text assistant reply."""

    async def reply(
        self,
        message: str,
        recent_entries: list[Entry],
        history: list[ChatMessage],
    ) -> str: ...


# ---------------------------------------------------------------------------
# Storage Ports
# ---------------------------------------------------------------------------

@runtime_checkable
class ImageStorePort(Protocol):
    """Persist raw image bytes and return a durable public URL."""

    async def save(self, data: bytes, filename: str, content_type: str) -> str: ...

    async def delete(self, url: str) -> None: ...


@runtime_checkable
class SuggestionCacheStore(Protocol):
    """Per-account suggestion cache, keyed by account id."""

    async def get(self, user_id: int) -> Optional[CachedSuggestions]: ...

    async def put(
        self,
        user_id: int,
        fingerprint: str,
        suggestions: SuggestionBundle,
        expected_fingerprint: Optional[str],
    ) -> bool: ...

    async def invalidate(self, user_id: int) -> None: ...


# ---------------------------------------------------------------------------
# Repository Ports
# ---------------------------------------------------------------------------

@runtime_checkable
class AccountRepository(Protocol):
    """CRUD operations for Account entities."""

    async def save(self, account: Account) -> int: ...
    async def get_by_id(self, user_id: int) -> Account | None: ...
    async def get_by_email(self, email: str) -> Account | None: ...


@runtime_checkable
class EntryRepository(Protocol):
    """Owner-scoped operations for journal entries."""

    async def save(self, entry: Entry) -> int: ...
    async def get_owned(self, entry_id: int, user_id: int) -> Entry | None: ...
    async def list_by_user(self, user_id: int, limit: int | None = None) -> list[Entry]: ...
    async def delete_owned(self, entry_id: int, user_id: int) -> bool: ...


@runtime_checkable
class ChatMessageRepository(Protocol):
    """Append-only chat log."""

    async def save(self, message: ChatMessage) -> int: ...
    async def recent_by_user(self, user_id: int, limit: int) -> list[ChatMessage]: ...
