"""
application.services.journal - Owner-scoped journal entry operations.

Creating an entry runs strictly in sequence:
    1. Load up to three prior entries for narrative context
    2. Store the image and obtain its public URL
    3. Mood analysis (never fails, see MoodAnalysisService)
    4. Persist the entry (the stored image is removed if this fails)
    5. Invalidate the suggestion cache

Every mutation (create and delete) invalidates the suggestion cache.
"""

from __future__ import annotations

import logging

from domain.entities import Entry
from domain.exceptions import (
    EntryNotFoundError,
    ImageStorageError,
    InvalidInputError,
    RepositoryError,
)
from domain.fingerprint import CONTEXT_WINDOW
from domain.models import MOOD_TAGS
from domain.ports import EntryRepository, ImageStorePort
from application.context import SessionContext
from application.dto import NewEntryRequest
from application.services.mood_analysis import MoodAnalysisService
from application.services.suggestions import SuggestionService

logger = logging.getLogger(__name__)


def validate_tags(tags: list[str]) -> list[str]:
    """Return tags de-duplicated in order, rejecting unknown ones."""
    unknown = [t for t in tags if t not in MOOD_TAGS]
    if unknown:
        raise InvalidInputError(
            f"Unknown mood tag(s): {', '.join(unknown)}. "
            f"Allowed: {', '.join(MOOD_TAGS)}"
        )
    return list(dict.fromkeys(tags))


class EntryService:
    """List, create and delete journal entries for the acting account."""

    def __init__(
        self,
        entry_repo: EntryRepository,
        image_store: ImageStorePort,
        mood_analysis: MoodAnalysisService,
        suggestions: SuggestionService,
    ):
        self._entry_repo = entry_repo
        self._image_store = image_store
        self._mood_analysis = mood_analysis
        self._suggestions = suggestions

    async def list_entries(self, ctx: SessionContext) -> list[Entry]:
        """All entries of the account, newest first."""
        return await self._entry_repo.list_by_user(ctx.user_id)

    async def recent_entries(
        self, ctx: SessionContext, limit: int = CONTEXT_WINDOW,
    ) -> list[Entry]:
        return await self._entry_repo.list_by_user(ctx.user_id, limit=limit)

    async def get_entry(self, ctx: SessionContext, entry_id: int) -> Entry:
        entry = await self._entry_repo.get_owned(entry_id, ctx.user_id)
        if entry is None:
            raise EntryNotFoundError(f"Entry {entry_id} not found.")
        return entry

    async def create_entry(
        self, ctx: SessionContext, request: NewEntryRequest,
    ) -> Entry:
        """Store the image, analyze the mood and persist a new entry."""
        caption = (request.caption or "").strip()
        if not request.image or not caption:
            raise InvalidInputError("Image and caption are required")
        if request.content_type and not request.content_type.startswith("image/"):
            raise InvalidInputError(
                f"Unsupported content type '{request.content_type}', expected an image."
            )
        tags = validate_tags(request.tags)

        prior = await self.recent_entries(ctx)
        image_url = await self._image_store.save(
            request.image, request.filename, request.content_type,
        )
        analysis = await self._mood_analysis.analyze(
            ctx,
            request.image,
            request.content_type or "image/jpeg",
            caption,
            tags,
            prior,
        )

        entry = Entry(
            user_id=ctx.user_id,
            image_url=image_url,
            caption=caption,
            tags=tags,
            mood_description=analysis.mood_description,
            detailed_mood_description=analysis.detailed_mood_description,
            traits=analysis.traits,
            overall_mood=analysis.overall_mood,
            suggestions=analysis.suggestions,
        )
        try:
            entry_id = await self._entry_repo.save(entry)
        except RepositoryError:
            await self._discard_image(image_url)
            raise
        await self._suggestions.invalidate(ctx.user_id)

        logger.info(
            "Created entry %d for user %d (mood=%s, fallback=%s)",
            entry_id, ctx.user_id, analysis.overall_mood.value, analysis.is_fallback,
        )
        return await self.get_entry(ctx, entry_id)

    async def _discard_image(self, image_url: str) -> None:
        """Remove an upload whose entry could not be saved."""
        try:
            await self._image_store.delete(image_url)
        except ImageStorageError:
            logger.exception("Could not remove orphaned image %s", image_url)

    async def delete_entry(self, ctx: SessionContext, entry_id: int) -> None:
        """Delete an owned entry; other accounts' entries are 'not found'."""
        deleted = await self._entry_repo.delete_owned(entry_id, ctx.user_id)
        if not deleted:
            logger.info(
                "Delete of entry %d by user %d refused: not found or not owned",
                entry_id, ctx.user_id,
            )
            raise EntryNotFoundError(f"Entry {entry_id} not found.")

        await self._suggestions.invalidate(ctx.user_id)
        logger.info("Deleted entry %d for user %d", entry_id, ctx.user_id)
