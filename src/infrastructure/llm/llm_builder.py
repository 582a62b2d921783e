"""
infrastructure.llm.llm_builder - Centralized chat model construction.

Single source of truth for building chat models across all AI adapters
(mood analyzer, suggestion generator, chat responder). The provider is
controlled by the LLM_PROVIDER setting.

Supported providers:
    - "openai"  → langchain_openai.ChatOpenAI
    - "groq"    → langchain_groq.ChatGroq
    - "ollama"  → langchain_ollama.ChatOllama

Adapters accept either a built model or a zero-argument loader. With a
loader the model is built on the first AI call, so a misconfigured
provider fails inside the call and the services fall back, instead of
failing while services are wired.
"""

from __future__ import annotations

import logging
from typing import Callable, Union

from langchain_core.language_models import BaseChatModel

logger = logging.getLogger(__name__)

GROQ_MAX_TOKENS = 1024

ChatModelSource = Union[BaseChatModel, Callable[[], BaseChatModel]]


def resolve_llm(source: ChatModelSource) -> BaseChatModel:
    """Return the model itself, or build it through its loader."""
    if isinstance(source, BaseChatModel):
        return source
    return source()


def build_llm(
    *,
    provider: str,
    model: str,
    temperature: float = 0,
    ollama_base_url: str = "http://localhost:11434/",
    openai_api_key: str = "",
    groq_api_key: str = "",
    json_mode: bool = False,
) -> BaseChatModel:
    """Build a chat model for the given provider.

    json_mode asks the provider for a single JSON object per reply; the
    mood analysis and suggestion prompts rely on it, chat does not.

    Raises:
        ValueError: If the provider is unknown or required credentials are missing.
    """
    provider = provider.lower().strip()

    if provider == "openai":
        from langchain_openai import ChatOpenAI

        if not openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER='openai'")

        kwargs = {
            "model": model,
            "temperature": temperature,
            "openai_api_key": openai_api_key,
        }
        if json_mode:
            kwargs["model_kwargs"] = {"response_format": {"type": "json_object"}}

        logger.info("Building OpenAI chat model (model=%s, json_mode=%s)", model, json_mode)
        return ChatOpenAI(**kwargs)

    elif provider == "groq":
        from langchain_groq import ChatGroq

        if not groq_api_key:
            raise ValueError("GROQ_API_KEY is required when LLM_PROVIDER='groq'")

        kwargs = {
            "model": model,
            "temperature": temperature,
            "groq_api_key": groq_api_key,
            "max_tokens": GROQ_MAX_TOKENS,
        }
        if json_mode:
            kwargs["model_kwargs"] = {"response_format": {"type": "json_object"}}

        logger.info("Building Groq chat model (model=%s, json_mode=%s)", model, json_mode)
        return ChatGroq(**kwargs)

    elif provider == "ollama":
        from langchain_ollama import ChatOllama

        kwargs = {
            "model": model,
            "temperature": temperature,
            "base_url": ollama_base_url,
        }
        if json_mode:
            kwargs["format"] = "json"

        logger.info("Building ChatOllama (model=%s, json_mode=%s)", model, json_mode)
        return ChatOllama(**kwargs)

    else:
        raise ValueError(
            f"Unsupported LLM_PROVIDER: '{provider}'. "
            "Must be 'openai', 'groq', or 'ollama'."
        )
