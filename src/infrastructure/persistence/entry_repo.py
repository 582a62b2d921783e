"""
infrastructure.persistence.entry_repo - SQLite journal entry repository.

Every read and delete is scoped by owner: an entry belonging to another
account is indistinguishable from a missing one. Tags and the per-entry
suggestion snapshot are stored as JSON text.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional

from domain.entities import Entry
from domain.models import MentalHealthTraits, MoodCategory, SuggestionBundle, TRAIT_NAMES
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteEntryRepository:
    """Async SQLite implementation of EntryRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, entry: Entry) -> int:
        now = datetime.now().isoformat()
        traits = entry.traits.to_dict()
        suggestions = (
            json.dumps(entry.suggestions.to_dict())
            if entry.suggestions is not None else None
        )
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                """INSERT INTO entries
                   (user_id, image_url, caption, tags, mood_description,
                    detailed_mood_description, anxiety, depression, stress,
                    happiness, energy, confidence, overall_mood, suggestions,
                    created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (entry.user_id, entry.image_url, entry.caption,
                 json.dumps(entry.tags), entry.mood_description,
                 entry.detailed_mood_description,
                 *(traits[name] for name in TRAIT_NAMES),
                 entry.overall_mood.value, suggestions, now),
            )
            entry.created_at = now
            return cursor.lastrowid

    async def get_owned(self, entry_id: int, user_id: int) -> Optional[Entry]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM entries WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            )
            if not rows:
                return None
            return self._row_to_entity(rows[0])

    async def list_by_user(
        self, user_id: int, limit: Optional[int] = None,
    ) -> list[Entry]:
        """Entries of *user_id*, newest first."""
        query = """SELECT * FROM entries
                   WHERE user_id = ?
                   ORDER BY created_at DESC, id DESC"""
        params: tuple = (user_id,)
        if limit is not None:
            query += " LIMIT ?"
            params = (user_id, limit)
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(query, params)
            return [self._row_to_entity(r) for r in rows]

    async def delete_owned(self, entry_id: int, user_id: int) -> bool:
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                "DELETE FROM entries WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            )
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_entity(row) -> Entry:
        suggestions = row["suggestions"]
        return Entry(
            id=row["id"],
            user_id=row["user_id"],
            image_url=row["image_url"],
            caption=row["caption"],
            tags=json.loads(row["tags"]) if row["tags"] else [],
            mood_description=row["mood_description"],
            detailed_mood_description=row["detailed_mood_description"],
            traits=MentalHealthTraits(**{name: row[name] for name in TRAIT_NAMES}),
            overall_mood=MoodCategory(row["overall_mood"]),
            suggestions=(
                SuggestionBundle.from_dict(json.loads(suggestions))
                if suggestions else None
            ),
            created_at=row["created_at"] or "",
        )
