"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from environment or passed
explicitly (tests build it directly with a temporary database path).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the mood journal.

    No module-level globals: construct via from_env() or pass explicitly
    in tests.
    """
    project_root: Path

    # Database
    db_path: str = "mood_journal.db"

    # Image storage: files land in upload_dir and are served under
    # {public_base_url}/uploads/
    upload_dir: str = "./uploads"
    public_base_url: str = "http://localhost:8000"

    # ── Centralized LLM Provider ────────────────────────────────
    # One setting controls ALL LLM components (mood analysis,
    # suggestions, chat). Allowed: "openai", "groq", "ollama"
    llm_provider: str = "ollama"

    # Text model names, only the one matching llm_provider is used.
    llm_model_ollama: str = "llama3.2"
    llm_model_openai: str = "gpt-4.1-mini"
    llm_model_groq: str = "llama-3.3-70b-versatile"

    # Vision model names for mood analysis.
    vision_model_ollama: str = "llava"
    vision_model_openai: str = "gpt-4.1-mini"
    vision_model_groq: str = "meta-llama/llama-4-scout-17b-16e-instruct"

    llm_temperature: float = 0.7

    # Suggestion cache backend: "sqlite" (columns on users) or "memory"
    suggestion_cache: str = "sqlite"

    # Connection details
    ollama_base_url: str = "http://localhost:11434/"
    groq_api_key: str = ""
    openai_api_key: str = ""

    # JWT
    jwt_secret: str = "change-me-in-production"
    jwt_expiry_hours: int = 24

    # REST
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    log_level: str = "INFO"

    @property
    def active_llm_model(self) -> str:
        """Return the text model name for the active LLM provider."""
        if self.llm_provider == "openai":
            return self.llm_model_openai
        elif self.llm_provider == "groq":
            return self.llm_model_groq
        return self.llm_model_ollama

    @property
    def active_vision_model(self) -> str:
        """Return the vision model name for the active LLM provider."""
        if self.llm_provider == "openai":
            return self.vision_model_openai
        elif self.llm_provider == "groq":
            return self.vision_model_groq
        return self.vision_model_ollama

    @classmethod
    def from_env(cls, project_root: Optional[Path] = None) -> Settings:
        """Build Settings from environment variables (and a .env file)."""
        from dotenv import load_dotenv
        load_dotenv()

        root = project_root or Path(__file__).resolve().parent.parent.parent
        origins = os.getenv("CORS_ORIGINS", "*")

        return cls(
            project_root=root,
            db_path=os.getenv("DB_PATH", "mood_journal.db"),
            upload_dir=os.getenv("UPLOAD_DIR", "./uploads"),
            public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/"),

            llm_provider=os.getenv("LLM_PROVIDER", "ollama"),
            llm_model_ollama=os.getenv("LLM_MODEL_OLLAMA", "llama3.2"),
            llm_model_openai=os.getenv("LLM_MODEL_OPENAI", "gpt-4.1-mini"),
            llm_model_groq=os.getenv("LLM_MODEL_GROQ", "llama-3.3-70b-versatile"),
            vision_model_ollama=os.getenv("VISION_MODEL_OLLAMA", "llava"),
            vision_model_openai=os.getenv("VISION_MODEL_OPENAI", "gpt-4.1-mini"),
            vision_model_groq=os.getenv(
                "VISION_MODEL_GROQ", "meta-llama/llama-4-scout-17b-16e-instruct",
            ),
            llm_temperature=float(os.getenv("LLM_TEMPERATURE", "0.7")),
            suggestion_cache=os.getenv("SUGGESTION_CACHE", "sqlite").lower(),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/"),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),

            jwt_secret=os.getenv("JWT_SECRET", "change-me-in-production"),
            jwt_expiry_hours=int(os.getenv("JWT_EXPIRY_HOURS", "24")),

            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "8000")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


def configure_logging(level: str = "INFO") -> None:
    """Apply the process-wide logging format once."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
