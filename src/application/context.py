"""
application.context - Request-scoped session context.

Every service call receives its context explicitly. Two concurrent users
get two different SessionContext instances.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4


@dataclass
class SessionContext:
    """Per-request context passed through all layers.

    Attributes:
        user_id:     Authenticated account ID (provided by adapter).
        email:       Account email from the token, for log lines.
        request_id:  Unique per request, for tracing/logging.
    """
    user_id: int
    email: str = ""
    request_id: str = field(default_factory=lambda: uuid4().hex)
