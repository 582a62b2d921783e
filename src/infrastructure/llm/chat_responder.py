"""
infrastructure.llm.chat_responder - Free-text assistant replies.

Implements ChatResponderPort. The recent entries and conversation are
rendered into the user turn; the system turn fixes tone and length.
"""

from __future__ import annotations

import asyncio
import logging

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from domain.entities import ChatMessage, Entry
from infrastructure.llm.llm_builder import ChatModelSource, resolve_llm
from infrastructure.llm.prompts import (
    CHAT_SYSTEM,
    CHAT_USER,
    format_conversation,
    format_entry_context,
)

logger = logging.getLogger(__name__)


class LLMChatResponder:
    """Context-aware supportive replies via a LangChain chain."""

    def __init__(self, llm: ChatModelSource):
        self._llm = llm
        self._prompt = ChatPromptTemplate.from_messages([
            ("system", CHAT_SYSTEM),
            ("user", CHAT_USER),
        ])

    async def reply(
        self,
        message: str,
        recent_entries: list[Entry],
        history: list[ChatMessage],
    ) -> str:
        variables = {
            "entries": format_entry_context(
                recent_entries,
                heading="Recent mood context",
                empty="No recent posts for context.",
            ),
            "conversation": format_conversation(history),
            "message": message,
        }
        chain = self._prompt | resolve_llm(self._llm) | StrOutputParser()
        loop = asyncio.get_event_loop()
        reply: str = await loop.run_in_executor(None, chain.invoke, variables)
        logger.debug("Chat reply (%d chars)", len(reply or ""))
        return reply or ""
