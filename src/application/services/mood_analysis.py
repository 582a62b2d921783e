"""
application.services.mood_analysis - Mood judgment for a new entry.

Composes MoodAnalyzerPort with SuggestionGeneratorPort:
    1. Vision model judges the image, caption, tags and recent context
    2. Text model turns that judgment into a per-entry suggestion snapshot

Entry creation must never fail because of the AI service, so both steps
branch explicitly on the decode outcome and fall back to static values.
"""

from __future__ import annotations

import dataclasses
import logging

from domain.entities import Entry
from domain.models import MoodAnalysis, SuggestionBundle
from domain.ports import MoodAnalyzerPort, SuggestionGeneratorPort
from application.context import SessionContext

logger = logging.getLogger(__name__)


class MoodAnalysisService:
    """Produces a MoodAnalysis, substituting a neutral fallback on failure."""

    def __init__(
        self,
        analyzer: MoodAnalyzerPort,
        suggestion_generator: SuggestionGeneratorPort,
    ):
        self._analyzer = analyzer
        self._suggestion_generator = suggestion_generator

    async def analyze(
        self,
        ctx: SessionContext,
        image: bytes,
        content_type: str,
        caption: str,
        tags: list[str],
        recent_entries: list[Entry],
    ) -> MoodAnalysis:
        """Analyze one entry. Always returns a judgment."""
        logger.info(
            "Analyzing mood for user %d (request=%s, context=%d entries)",
            ctx.user_id, ctx.request_id, len(recent_entries),
        )
        try:
            result = await self._analyzer.analyze(
                image, content_type, caption, tags, recent_entries,
            )
        except Exception:
            logger.exception("Mood analysis call failed for user %d", ctx.user_id)
            return MoodAnalysis.fallback()

        if not result.ok:
            logger.warning(
                "Malformed mood analysis for user %d: %s", ctx.user_id, result.error,
            )
            return MoodAnalysis.fallback()

        analysis = result.value
        suggestions = await self._entry_suggestions(ctx, analysis, caption)
        logger.info(
            "Mood for user %d: %s", ctx.user_id, analysis.overall_mood.value,
        )
        return dataclasses.replace(analysis, suggestions=suggestions)

    async def _entry_suggestions(
        self,
        ctx: SessionContext,
        analysis: MoodAnalysis,
        caption: str,
    ) -> SuggestionBundle:
        try:
            result = await self._suggestion_generator.for_analysis(analysis, caption)
        except Exception:
            logger.exception("Entry suggestion call failed for user %d", ctx.user_id)
            return SuggestionBundle.fallback()
        if not result.ok:
            logger.warning(
                "Malformed entry suggestions for user %d: %s", ctx.user_id, result.error,
            )
            return SuggestionBundle.fallback()
        return result.value
