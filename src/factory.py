"""
factory - Composition root for the mood journal.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services.

Usage:
    from factory import ServiceFactory
    from infrastructure.config import Settings

    config = Settings.from_env()
    factory = ServiceFactory(config)
    await factory.initialize()  # one-time startup

    service = factory.create_entry_service()
    entries = await service.list_entries(ctx)

Tests subclass the factory and override the private builders
(_mood_analyzer, _suggestion_generator, _chat_responder, _image_store)
to swap the AI and storage adapters for fakes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from langchain_core.language_models import BaseChatModel

from domain.ports import (
    ChatResponderPort,
    ImageStorePort,
    MoodAnalyzerPort,
    SuggestionCacheStore,
    SuggestionGeneratorPort,
)
from infrastructure.config import Settings
from infrastructure.persistence.connection import AsyncSQLiteConnection
from infrastructure.persistence.migrations import run_migrations
from infrastructure.persistence.account_repo import SQLiteAccountRepository
from infrastructure.persistence.entry_repo import SQLiteEntryRepository
from infrastructure.persistence.chat_message_repo import SQLiteChatMessageRepository
from infrastructure.persistence.suggestion_cache_store import SQLiteSuggestionCacheStore
from infrastructure.persistence.memory_cache_store import InMemorySuggestionCacheStore
from infrastructure.llm.llm_builder import build_llm
from infrastructure.llm.mood_analyzer import VisionMoodAnalyzer
from infrastructure.llm.suggestion_generator import LLMSuggestionGenerator
from infrastructure.llm.chat_responder import LLMChatResponder
from infrastructure.storage.local_image_store import LocalImageStore
from application.services.authentication import AuthenticationService
from application.services.suggestions import SuggestionService
from application.services.mood_analysis import MoodAnalysisService
from application.services.journal import EntryService
from application.services.chat import ChatService
from application.services.analytics import AnalyticsService

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root: wires all dependencies together.

    Call initialize() once at startup, then create services as needed.
    Chat models are built on the first AI call and shared afterwards, so a
    misconfigured provider only degrades AI results to their fallbacks.
    """

    def __init__(self, config: Settings):
        self._config = config
        self._connection = AsyncSQLiteConnection(config.db_path)

        self._cache_store: Optional[SuggestionCacheStore] = None
        self._models: dict[str, BaseChatModel] = {}
        self._initialized = False

    @property
    def config(self) -> Settings:
        return self._config

    async def initialize(self) -> None:
        """One-time startup: run migrations and create the upload directory."""
        logger.info("Initializing ServiceFactory...")

        await run_migrations(self._connection)
        logger.info("Database migrations complete")

        Path(self._config.upload_dir).mkdir(parents=True, exist_ok=True)

        self._initialized = True
        logger.info(
            "ServiceFactory ready (provider=%s, text=%s, vision=%s, cache=%s)",
            self._config.llm_provider,
            self._config.active_llm_model,
            self._config.active_vision_model,
            self._config.suggestion_cache,
        )

    # ------------------------------------------------------------------
    # Service creation
    # ------------------------------------------------------------------

    def create_authentication_service(self) -> AuthenticationService:
        return AuthenticationService(
            account_repo=SQLiteAccountRepository(self._connection),
            jwt_secret=self._config.jwt_secret,
            jwt_expiry_hours=self._config.jwt_expiry_hours,
        )

    def create_suggestion_service(self) -> SuggestionService:
        return SuggestionService(
            store=self._suggestion_cache_store(),
            generator=self._suggestion_generator(),
        )

    def create_mood_analysis_service(self) -> MoodAnalysisService:
        return MoodAnalysisService(
            analyzer=self._mood_analyzer(),
            suggestion_generator=self._suggestion_generator(),
        )

    def create_entry_service(self) -> EntryService:
        """Create an EntryService with image storage, analysis and cache wired."""
        self._ensure_initialized()
        return EntryService(
            entry_repo=SQLiteEntryRepository(self._connection),
            image_store=self._image_store(),
            mood_analysis=self.create_mood_analysis_service(),
            suggestions=self.create_suggestion_service(),
        )

    def create_chat_service(self) -> ChatService:
        self._ensure_initialized()
        return ChatService(
            message_repo=SQLiteChatMessageRepository(self._connection),
            entry_repo=SQLiteEntryRepository(self._connection),
            responder=self._chat_responder(),
        )

    def create_analytics_service(self) -> AnalyticsService:
        self._ensure_initialized()
        return AnalyticsService(
            entry_repo=SQLiteEntryRepository(self._connection),
            suggestions=self.create_suggestion_service(),
        )

    # ------------------------------------------------------------------
    # Adapter builders (overridable)
    # ------------------------------------------------------------------

    def _suggestion_cache_store(self) -> SuggestionCacheStore:
        if self._cache_store is None:
            if self._config.suggestion_cache == "memory":
                self._cache_store = InMemorySuggestionCacheStore()
            else:
                self._cache_store = SQLiteSuggestionCacheStore(self._connection)
        return self._cache_store

    def _image_store(self) -> ImageStorePort:
        return LocalImageStore(
            upload_dir=self._config.upload_dir,
            public_base_url=self._config.public_base_url,
        )

    def _mood_analyzer(self) -> MoodAnalyzerPort:
        return VisionMoodAnalyzer(self._vision_model)

    def _suggestion_generator(self) -> SuggestionGeneratorPort:
        return LLMSuggestionGenerator(self._json_text_model)

    def _chat_responder(self) -> ChatResponderPort:
        return LLMChatResponder(self._chat_model)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _vision_model(self) -> BaseChatModel:
        return self._model("vision", self._config.active_vision_model, json_mode=True)

    def _json_text_model(self) -> BaseChatModel:
        return self._model("text-json", self._config.active_llm_model, json_mode=True)

    def _chat_model(self) -> BaseChatModel:
        return self._model("chat", self._config.active_llm_model, json_mode=False)

    def _model(self, role: str, model: str, json_mode: bool) -> BaseChatModel:
        if role not in self._models:
            self._models[role] = build_llm(
                provider=self._config.llm_provider,
                model=model,
                temperature=self._config.llm_temperature,
                ollama_base_url=self._config.ollama_base_url,
                openai_api_key=self._config.openai_api_key,
                groq_api_key=self._config.groq_api_key,
                json_mode=json_mode,
            )
        return self._models[role]

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "ServiceFactory not initialized. Call await factory.initialize() first."
            )
