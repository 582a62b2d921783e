"""
application.services.chat - Context-aware chat assistant.

Each user message is appended to the account's chat log, answered with
the three most recent entries and the last ten messages as context, and
the reply is appended too.
"""

from __future__ import annotations

import logging

from domain.entities import ChatMessage
from domain.exceptions import InvalidInputError
from domain.fingerprint import CONTEXT_WINDOW
from domain.ports import ChatMessageRepository, ChatResponderPort, EntryRepository
from application.context import SessionContext

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50
CONVERSATION_WINDOW = 10

FALLBACK_REPLY = (
    "I'm here to help with your mental health journey. How are you feeling today?"
)


class ChatService:
    """Persists chat messages and requests assistant replies."""

    def __init__(
        self,
        message_repo: ChatMessageRepository,
        entry_repo: EntryRepository,
        responder: ChatResponderPort,
    ):
        self._message_repo = message_repo
        self._entry_repo = entry_repo
        self._responder = responder

    async def history(
        self, ctx: SessionContext, limit: int = HISTORY_LIMIT,
    ) -> list[ChatMessage]:
        """The most recent messages, oldest first."""
        return await self._message_repo.recent_by_user(ctx.user_id, limit)

    async def send(self, ctx: SessionContext, message: object) -> ChatMessage:
        """Append a user message and return the persisted assistant reply."""
        if not isinstance(message, str) or not message.strip():
            raise InvalidInputError("Message is required")

        await self._append(ctx, "user", message)

        recent_entries = await self._entry_repo.list_by_user(
            ctx.user_id, limit=CONTEXT_WINDOW,
        )
        conversation = await self._message_repo.recent_by_user(
            ctx.user_id, CONVERSATION_WINDOW,
        )

        try:
            reply = (await self._responder.reply(message, recent_entries, conversation)).strip()
            if not reply:
                raise ValueError("empty reply")
        except Exception:
            logger.exception(
                "Chat reply failed for user %d (request=%s)", ctx.user_id, ctx.request_id,
            )
            reply = FALLBACK_REPLY

        return await self._append(ctx, "assistant", reply)

    async def _append(self, ctx: SessionContext, role: str, content: str) -> ChatMessage:
        msg = ChatMessage(user_id=ctx.user_id, role=role, content=content)
        msg.id = await self._message_repo.save(msg)
        logger.debug("Saved %s message %d for user %d", role, msg.id, ctx.user_id)
        return msg
