"""
application.services.suggestions - Fingerprint-keyed suggestion cache.

Personalised suggestions are regenerated only when the fingerprint of the
user's three most recent entries changes:

    1. Compute the fingerprint of the current context
    2. Compare with the stored fingerprint
    3. Hit  -> return the stored bundle, no AI call
       Miss -> generate once, conditionally persist, return

The conditional write only lands if the stored fingerprint is still the
one read in step 2, so a slow request never overwrites a record written
for a newer context. Two racing misses may both call the generator.
"""

from __future__ import annotations

import logging
from typing import Optional

from domain.entities import CachedSuggestions, Entry
from domain.fingerprint import CONTEXT_WINDOW, context_fingerprint
from domain.models import SuggestionBundle
from domain.ports import SuggestionCacheStore, SuggestionGeneratorPort
from application.context import SessionContext

logger = logging.getLogger(__name__)


class SuggestionService:
    """Serves cached suggestions, regenerating them on context change."""

    def __init__(
        self,
        store: SuggestionCacheStore,
        generator: SuggestionGeneratorPort,
    ):
        self._store = store
        self._generator = generator

    async def get_suggestions(
        self,
        ctx: SessionContext,
        recent_entries: list[Entry],
    ) -> SuggestionBundle:
        """Return suggestions for the given newest-first entries."""
        if not recent_entries:
            return SuggestionBundle.empty()

        context = recent_entries[:CONTEXT_WINDOW]
        current = str(context_fingerprint(context))
        cached = await self._store.get(ctx.user_id)
        stored = cached.fingerprint if cached else None

        if stored == current and _usable(cached):
            logger.info(
                "Suggestion cache hit for user %d (fingerprint=%s)",
                ctx.user_id, current,
            )
            return cached.suggestions

        if stored == current:
            logger.info(
                "Suggestion cache for user %d matches but is incomplete, regenerating",
                ctx.user_id,
            )
        else:
            logger.info(
                "Suggestion cache miss for user %d (stored=%s, current=%s)",
                ctx.user_id, stored or "none", current,
            )

        bundle = await self._generate(ctx, context)
        if bundle is None:
            return SuggestionBundle.fallback()

        written = await self._store.put(
            ctx.user_id, current, bundle, expected_fingerprint=stored,
        )
        if not written:
            logger.info(
                "Suggestion cache for user %d changed concurrently, keeping newer record",
                ctx.user_id,
            )
        return bundle

    async def invalidate(self, user_id: int) -> None:
        """Drop the cached bundle and fingerprint, forcing regeneration."""
        await self._store.invalidate(user_id)
        logger.debug("Suggestion cache invalidated for user %d", user_id)

    async def clear_cache(self, ctx: SessionContext) -> None:
        await self.invalidate(ctx.user_id)
        logger.info("Suggestion cache cleared on request for user %d", ctx.user_id)

    async def _generate(
        self,
        ctx: SessionContext,
        context: list[Entry],
    ) -> Optional[SuggestionBundle]:
        try:
            result = await self._generator.for_context(context)
        except Exception:
            logger.exception(
                "Suggestion generation failed for user %d (request=%s)",
                ctx.user_id, ctx.request_id,
            )
            return None
        if not result.ok:
            logger.warning(
                "Malformed suggestion response for user %d: %s",
                ctx.user_id, result.error,
            )
            return None
        return result.value


def _usable(cached: Optional[CachedSuggestions]) -> bool:
    return (
        cached is not None
        and cached.suggestions is not None
        and cached.suggestions.is_complete
    )
