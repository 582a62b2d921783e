"""
application.services.analytics - Read-time statistics over journal entries.

Nothing here is persisted. Suggestions are delegated to SuggestionService
with the three most recent entries.
"""

from __future__ import annotations

import logging
import math

from domain.entities import Entry
from domain.fingerprint import CONTEXT_WINDOW
from domain.models import TRAIT_NAMES, MoodCategory, SuggestionBundle
from domain.ports import EntryRepository
from application.context import SessionContext
from application.dto import AnalyticsReport
from application.services.suggestions import SuggestionService

logger = logging.getLogger(__name__)

TREND_WINDOW = 10
TOP_DESCRIPTIONS = 5


def round_half_up(value: float, digits: int = 1) -> float:
    """Round like ``Math.round(x * 10) / 10`` (halves go up)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def average_scores(entries: list[Entry]) -> dict[str, float]:
    if not entries:
        return {name: 0.0 for name in TRAIT_NAMES}
    return {
        name: round_half_up(
            sum(getattr(e.traits, name) for e in entries) / len(entries)
        )
        for name in TRAIT_NAMES
    }


def mood_distribution(entries: list[Entry]) -> dict[str, int]:
    counts = {category.value: 0 for category in MoodCategory}
    for entry in entries:
        counts[entry.overall_mood.value] += 1
    return counts


def recent_trends(entries: list[Entry]) -> dict[str, list[int]]:
    """Per-trait scores of the newest TREND_WINDOW entries, oldest first."""
    window = list(reversed(entries[:TREND_WINDOW]))
    return {
        name: [getattr(e.traits, name) for e in window]
        for name in TRAIT_NAMES
    }


def top_mood_descriptions(entries: list[Entry]) -> list[str]:
    unique = dict.fromkeys(e.detailed_mood_description for e in entries)
    return list(unique)[:TOP_DESCRIPTIONS]


class AnalyticsService:
    """Aggregates an account's entries for the analytics view."""

    def __init__(
        self,
        entry_repo: EntryRepository,
        suggestions: SuggestionService,
    ):
        self._entry_repo = entry_repo
        self._suggestions = suggestions

    async def summarize(self, ctx: SessionContext) -> AnalyticsReport:
        entries = await self._entry_repo.list_by_user(ctx.user_id)
        logger.info(
            "Building analytics for user %d over %d entries", ctx.user_id, len(entries),
        )

        if entries:
            suggestions = await self._suggestions.get_suggestions(
                ctx, entries[:CONTEXT_WINDOW],
            )
        else:
            suggestions = SuggestionBundle.empty()

        return AnalyticsReport(
            total_entries=len(entries),
            average_scores=average_scores(entries),
            mood_distribution=mood_distribution(entries),
            recent_trends=recent_trends(entries),
            top_mood_descriptions=top_mood_descriptions(entries),
            suggestions=suggestions,
            entries=entries,
        )
