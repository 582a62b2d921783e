"""
infrastructure.llm.suggestion_generator - Text-model suggestion bundles.

Implements SuggestionGeneratorPort with two prompts sharing one model:
    - for_context:  detailed, therapeutic suggestions from recent entries
    - for_analysis: short (under four words) items for a single entry
"""

from __future__ import annotations

import asyncio
import logging

from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate

from domain.entities import Entry
from domain.exceptions import AIServiceError
from domain.models import DecodeResult, MoodAnalysis, SuggestionBundle
from infrastructure.llm.json_decoding import decode_suggestions
from infrastructure.llm.llm_builder import ChatModelSource, resolve_llm
from infrastructure.llm.prompts import (
    CONTEXT_SUGGESTIONS_PROMPT,
    ENTRY_SUGGESTIONS_PROMPT,
    SUGGESTION_SYSTEM,
    format_analysis,
    format_entry_context,
)

logger = logging.getLogger(__name__)


def _prompt(template: str) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages([
        ("system", SUGGESTION_SYSTEM),
        ("user", template),
    ])


class LLMSuggestionGenerator:
    """Builds suggestion bundles with LangChain prompt | llm | parser chains."""

    def __init__(self, llm: ChatModelSource):
        self._llm = llm
        self._context_prompt = _prompt(CONTEXT_SUGGESTIONS_PROMPT)
        self._entry_prompt = _prompt(ENTRY_SUGGESTIONS_PROMPT)

    async def for_context(
        self, recent_entries: list[Entry],
    ) -> DecodeResult[SuggestionBundle]:
        context = format_entry_context(
            recent_entries,
            heading="Recent mood context",
            empty="No recent posts for context.",
        )
        return await self._run(self._context_prompt, {"context": context})

    async def for_analysis(
        self, analysis: MoodAnalysis, caption: str,
    ) -> DecodeResult[SuggestionBundle]:
        return await self._run(
            self._entry_prompt, {"analysis": format_analysis(analysis, caption)},
        )

    async def _run(
        self, prompt: ChatPromptTemplate, variables: dict,
    ) -> DecodeResult[SuggestionBundle]:
        chain = prompt | resolve_llm(self._llm) | StrOutputParser()
        loop = asyncio.get_event_loop()
        raw: str = await loop.run_in_executor(None, chain.invoke, variables)
        if not raw or not raw.strip():
            raise AIServiceError("Suggestion model returned an empty response")
        logger.debug("Suggestion raw response: %s", raw)
        return decode_suggestions(raw)
