"""
infrastructure.llm.mood_analyzer - Vision-model mood judgment.

Implements MoodAnalyzerPort. The image travels inline as a base64 data
URL inside a multimodal HumanMessage, next to the text prompt.

Transport errors propagate to MoodAnalysisService; malformed replies come
back as a DecodeResult error.
"""

from __future__ import annotations

import asyncio
import base64
import logging

from langchain_core.messages import HumanMessage

from domain.entities import Entry
from domain.exceptions import AIServiceError
from domain.models import DecodeResult, MoodAnalysis
from infrastructure.llm.json_decoding import decode_mood_analysis
from infrastructure.llm.llm_builder import ChatModelSource, resolve_llm
from infrastructure.llm.prompts import (
    MOOD_ANALYSIS_PROMPT,
    format_entry_context,
    format_tags,
)

logger = logging.getLogger(__name__)


def message_text(message) -> str:
    """Flatten an AIMessage's content (str or list of parts) to text."""
    content = getattr(message, "content", message)
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class VisionMoodAnalyzer:
    """Sends the entry image and prompt to a vision-capable chat model."""

    def __init__(self, llm: ChatModelSource):
        self._llm = llm

    def build_messages(
        self,
        image: bytes,
        content_type: str,
        caption: str,
        tags: list[str],
        recent_entries: list[Entry],
    ) -> list[HumanMessage]:
        prompt = MOOD_ANALYSIS_PROMPT.format(
            caption=caption,
            tags=format_tags(tags),
            context=format_entry_context(
                recent_entries,
                heading="Previous mood context",
                empty="No previous posts for context.",
            ),
        )
        data_url = f"data:{content_type};base64,{base64.b64encode(image).decode()}"
        return [HumanMessage(content=[
            {"type": "text", "text": prompt},
            {"type": "image_url", "image_url": {"url": data_url}},
        ])]

    async def analyze(
        self,
        image: bytes,
        content_type: str,
        caption: str,
        tags: list[str],
        recent_entries: list[Entry],
    ) -> DecodeResult[MoodAnalysis]:
        messages = self.build_messages(image, content_type, caption, tags, recent_entries)
        llm = resolve_llm(self._llm)

        loop = asyncio.get_event_loop()
        response = await loop.run_in_executor(None, llm.invoke, messages)
        raw = message_text(response)
        if not raw.strip():
            raise AIServiceError("Vision model returned an empty response")

        logger.debug("Mood analysis raw response: %s", raw)
        return decode_mood_analysis(raw)
