"""
infrastructure.persistence.suggestion_cache_store - Suggestion cache on the users row.

The fingerprint, bundle and timestamp live in three columns of the
account's row. A write is a compare-and-set on the fingerprint column so
a stale request cannot overwrite a record stored for a newer context.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional

from domain.entities import CachedSuggestions
from domain.models import SuggestionBundle
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteSuggestionCacheStore:
    """Async SQLite implementation of SuggestionCacheStore."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def get(self, user_id: int) -> Optional[CachedSuggestions]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                """SELECT id, last_context_hash, cached_suggestions,
                          last_context_updated_at
                   FROM users WHERE id = ?""",
                (user_id,),
            )
            if not rows:
                return None
            row = rows[0]
            raw = row["cached_suggestions"]
            return CachedSuggestions(
                user_id=row["id"],
                fingerprint=row["last_context_hash"],
                suggestions=SuggestionBundle.from_dict(json.loads(raw)) if raw else None,
                updated_at=row["last_context_updated_at"] or "",
            )

    async def put(
        self,
        user_id: int,
        fingerprint: str,
        suggestions: SuggestionBundle,
        expected_fingerprint: Optional[str],
    ) -> bool:
        """Store the bundle if the stored fingerprint still equals *expected_fingerprint*."""
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                """UPDATE users
                   SET last_context_hash = ?,
                       cached_suggestions = ?,
                       last_context_updated_at = ?
                   WHERE id = ? AND last_context_hash IS ?""",
                (fingerprint, json.dumps(suggestions.to_dict()),
                 datetime.now().isoformat(), user_id, expected_fingerprint),
            )
            return cursor.rowcount > 0

    async def invalidate(self, user_id: int) -> None:
        async with self._conn.acquire() as conn:
            await conn.execute(
                """UPDATE users
                   SET last_context_hash = NULL,
                       cached_suggestions = NULL,
                       last_context_updated_at = NULL
                   WHERE id = ?""",
                (user_id,),
            )
