"""
infrastructure.persistence.account_repo - SQLite account repository.

Implements AccountRepository. The suggestion cache columns on the same
row are owned by SQLiteSuggestionCacheStore and never touched here.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import aiosqlite

from domain.entities import Account
from domain.exceptions import DuplicateLoginError
from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteAccountRepository:
    """Async SQLite implementation of AccountRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def get_by_id(self, user_id: int) -> Optional[Account]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM users WHERE id = ?", (user_id,),
            )
            if not rows:
                return None
            return self._row_to_account(rows[0])

    async def get_by_email(self, email: str) -> Optional[Account]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                "SELECT * FROM users WHERE email = ?", (email,),
            )
            if not rows:
                return None
            return self._row_to_account(rows[0])

    async def save(self, account: Account) -> int:
        """Insert a new account.

        The UNIQUE email constraint is the final duplicate check, so a
        registration racing another for the same email still fails cleanly.
        """
        now = datetime.now().isoformat()
        async with self._conn.acquire() as conn:
            try:
                cursor = await conn.execute(
                    """INSERT INTO users (email, name, password_hash, image,
                                          created_at, updated_at)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (account.email, account.name, account.password_hash,
                     account.image, now, now),
                )
            except aiosqlite.IntegrityError as exc:
                raise DuplicateLoginError(
                    f"Email '{account.email}' is already registered."
                ) from exc
            account.created_at = account.updated_at = now
            return cursor.lastrowid

    @staticmethod
    def _row_to_account(row) -> Account:
        return Account(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            password_hash=row["password_hash"],
            image=row["image"] or "",
            created_at=row["created_at"] or "",
            updated_at=row["updated_at"] or "",
        )
