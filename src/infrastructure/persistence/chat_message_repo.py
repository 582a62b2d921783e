"""
infrastructure.persistence.chat_message_repo - SQLite chat message repository.

Append-only log of user and assistant turns, one log per account.
"""

from __future__ import annotations

import logging
from datetime import datetime

from domain.entities import ChatMessage
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteChatMessageRepository:
    """Async SQLite implementation of ChatMessageRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def save(self, message: ChatMessage) -> int:
        now = datetime.now().isoformat()
        async with self._conn.acquire() as conn:
            cursor = await conn.execute(
                """INSERT INTO chat_messages (user_id, role, content, created_at)
                   VALUES (?, ?, ?, ?)""",
                (message.user_id, message.role, message.content, now),
            )
            message.created_at = now
            return cursor.lastrowid

    async def recent_by_user(self, user_id: int, limit: int) -> list[ChatMessage]:
        """The newest *limit* messages, returned oldest first."""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                """SELECT * FROM chat_messages
                   WHERE user_id = ?
                   ORDER BY created_at DESC, id DESC
                   LIMIT ?""",
                (user_id, limit),
            )
            return [self._row_to_entity(r) for r in reversed(list(rows))]

    @staticmethod
    def _row_to_entity(row) -> ChatMessage:
        return ChatMessage(
            id=row["id"],
            user_id=row["user_id"],
            role=row["role"] or "",
            content=row["content"] or "",
            created_at=row["created_at"] or "",
        )
