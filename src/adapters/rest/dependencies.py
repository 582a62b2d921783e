"""
Shared FastAPI dependencies.

- get_factory(): returns the initialized ServiceFactory (set at startup).
- get_current_user(): JWT bearer token extraction and validation.
- build_session_ctx(): per-request SessionContext for service calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from factory import ServiceFactory
from domain.exceptions import AuthenticationError
from application.context import SessionContext

# Module-level reference set by app lifespan
_factory: ServiceFactory | None = None


def set_factory(factory: ServiceFactory | None) -> None:
    global _factory
    _factory = factory


def get_factory() -> ServiceFactory:
    if _factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return _factory


# --- JWT Bearer ---

# auto_error=False so a missing header is a 401, not FastAPI's default 403
_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class CurrentUser:
    """Extracted from JWT payload. Passed to route handlers."""
    user_id: int
    email: str


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    factory: ServiceFactory = Depends(get_factory),
) -> CurrentUser:
    """Validate JWT and return CurrentUser. Raises 401 on failure."""
    if credentials is None:
        raise _unauthorized("Unauthorized")
    auth_service = factory.create_authentication_service()
    try:
        payload = auth_service.verify_token(credentials.credentials)
    except AuthenticationError:
        raise _unauthorized("Invalid or expired token.")
    return CurrentUser(
        user_id=payload["user_id"],
        email=payload.get("email", ""),
    )


def build_session_ctx(user: CurrentUser) -> SessionContext:
    return SessionContext(user_id=user.user_id, email=user.email)
