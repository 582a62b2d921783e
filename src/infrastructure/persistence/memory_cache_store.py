"""
infrastructure.persistence.memory_cache_store - Process-local suggestion cache.

Same compare-and-set contract as the SQLite store, guarded by an
asyncio.Lock. Lives only as long as the process; the tests run on it.
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Optional

from domain.entities import CachedSuggestions
from domain.models import SuggestionBundle


class InMemorySuggestionCacheStore:
    """Dict-backed implementation of SuggestionCacheStore."""

    def __init__(self):
        self._records: dict[int, CachedSuggestions] = {}
        self._lock = asyncio.Lock()

    async def get(self, user_id: int) -> Optional[CachedSuggestions]:
        return self._records.get(user_id)

    async def put(
        self,
        user_id: int,
        fingerprint: str,
        suggestions: SuggestionBundle,
        expected_fingerprint: Optional[str],
    ) -> bool:
        async with self._lock:
            current = self._records.get(user_id)
            stored = current.fingerprint if current else None
            if stored != expected_fingerprint:
                return False
            self._records[user_id] = CachedSuggestions(
                user_id=user_id,
                fingerprint=fingerprint,
                suggestions=suggestions,
                updated_at=datetime.now().isoformat(),
            )
            return True

    async def invalidate(self, user_id: int) -> None:
        async with self._lock:
            self._records.pop(user_id, None)
