"""
Run the Mood Journal REST API.

Usage:
    python run_api.py

Environment variables (all optional):
    API_HOST / API_PORT   Bind address (default: 0.0.0.0:8000)
    DB_PATH               SQLite database file path (default: mood_journal.db)
    UPLOAD_DIR            Where uploaded images are stored (default: ./uploads)
    PUBLIC_BASE_URL       Base of returned image URLs (default: http://localhost:8000)
    JWT_SECRET            Secret key for signing JWT tokens (change in production!)
    JWT_EXPIRY_HOURS      Token lifetime in hours (default: 24)
    LLM_PROVIDER          "openai", "groq", or "ollama" (default: ollama)
    OPENAI_API_KEY        Required when LLM_PROVIDER=openai
    GROQ_API_KEY          Required when LLM_PROVIDER=groq
    OLLAMA_BASE_URL       Ollama server URL (default: http://localhost:11434/)
    LOG_LEVEL             Logging level (default: INFO)
"""

import os
import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "adapters.rest.app:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        reload=True,
        app_dir=str(Path(__file__).parent / "src"),
    )
