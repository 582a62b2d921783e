"""
infrastructure.persistence.migrations - Database schema creation.

Called once at startup by the factory (REST lifespan or CLI).
"""

from __future__ import annotations

import logging

from infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_TABLES = [
    """CREATE TABLE IF NOT EXISTS users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        password_hash TEXT NOT NULL,
        image TEXT,
        last_context_hash TEXT,
        last_context_updated_at TEXT,
        cached_suggestions TEXT,
        created_at TEXT,
        updated_at TEXT
    )""",
    """CREATE TABLE IF NOT EXISTS entries (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        image_url TEXT NOT NULL,
        caption TEXT NOT NULL,
        tags TEXT,
        mood_description TEXT NOT NULL,
        detailed_mood_description TEXT NOT NULL,
        anxiety INTEGER CHECK (anxiety BETWEEN 0 AND 10),
        depression INTEGER CHECK (depression BETWEEN 0 AND 10),
        stress INTEGER CHECK (stress BETWEEN 0 AND 10),
        happiness INTEGER CHECK (happiness BETWEEN 0 AND 10),
        energy INTEGER CHECK (energy BETWEEN 0 AND 10),
        confidence INTEGER CHECK (confidence BETWEEN 0 AND 10),
        overall_mood TEXT NOT NULL,
        suggestions TEXT,
        created_at TEXT,
        FOREIGN KEY (user_id) REFERENCES users(id)
    )""",
    """CREATE INDEX IF NOT EXISTS idx_entries_user_created
        ON entries (user_id, created_at)""",
    """CREATE TABLE IF NOT EXISTS chat_messages (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_id INTEGER NOT NULL,
        role TEXT NOT NULL,
        content TEXT NOT NULL,
        created_at TEXT,
        FOREIGN KEY (user_id) REFERENCES users(id)
    )""",
    """CREATE INDEX IF NOT EXISTS idx_chat_messages_user_created
        ON chat_messages (user_id, created_at)""",
]


async def run_migrations(connection: AsyncSQLiteConnection) -> None:
    """Create all tables if they don't exist.

    Safe to call multiple times (uses IF NOT EXISTS).
    """
    async with connection.acquire() as conn:
        for ddl in _TABLES:
            await conn.execute(ddl)
    logger.info("All tables created (or already exist) in %s", connection.db_path)
