"""
Run the Mood Journal CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    init-db      Create the database schema and upload directory
    register     Create a new account
    login        Sign in and save credentials locally (~/.mood-journal/session.json)
    logout       Clear stored credentials
    whoami       Show the currently signed-in account
    post         Add a journal entry from an image file
    entries      List your entries
    delete       Delete an entry
    analytics    Mood statistics and suggestions
    chat         Interactive chat session
    history      Recent chat messages
    clear-cache  Forget cached suggestions

Examples:
    python run_cli.py login
    python run_cli.py post photo.jpg --caption "Lazy Sunday" --tag Calm
    python run_cli.py analytics

Environment variables (all optional):
    LLM_PROVIDER        "openai", "groq", or "ollama"; controls ALL AI components
    LLM_MODEL_OPENAI    Text model when LLM_PROVIDER=openai (default: gpt-4.1-mini)
    LLM_MODEL_GROQ      Text model when LLM_PROVIDER=groq (default: llama-3.3-70b-versatile)
    LLM_MODEL_OLLAMA    Text model when LLM_PROVIDER=ollama (default: llama3.2)
    VISION_MODEL_*      Vision model per provider, used for mood analysis
    OPENAI_API_KEY      Required when LLM_PROVIDER=openai
    GROQ_API_KEY        Required when LLM_PROVIDER=groq
    DB_PATH             SQLite database file path (default: mood_journal.db)
    OLLAMA_BASE_URL     Ollama server URL (default: http://localhost:11434/)
"""

import sys
from pathlib import Path

# Ensure src/ is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from adapters.cli.main import app

if __name__ == "__main__":
    app()
