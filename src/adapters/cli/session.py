"""
adapters.cli.session - Local session credential storage.

Credentials (user_id + JWT access_token) are stored in
~/.mood-journal/session.json so the user stays signed in between CLI
invocations.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, asdict
from pathlib import Path

_SESSION_DIR = Path.home() / ".mood-journal"
_SESSION_FILE = _SESSION_DIR / "session.json"


@dataclass
class Session:
    user_id: int
    access_token: str
    email: str = ""
    name: str = ""


def load_session(path: Path = _SESSION_FILE) -> Session | None:
    """Return the stored session, or None if the user is not signed in.

    A corrupt or outdated session file counts as signed out.
    """
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Session(**data)
    except (ValueError, TypeError):
        return None


def save_session(session: Session, path: Path = _SESSION_FILE) -> None:
    """Persist session credentials to disk."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(session), indent=2), encoding="utf-8")


def clear_session(path: Path = _SESSION_FILE) -> None:
    """Delete stored credentials (logout)."""
    if path.exists():
        path.unlink()
