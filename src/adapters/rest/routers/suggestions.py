"""Suggestion cache maintenance."""

from fastapi import APIRouter, Depends

from factory import ServiceFactory
from adapters.rest.dependencies import (
    CurrentUser,
    build_session_ctx,
    get_current_user,
    get_factory,
)

router = APIRouter(prefix="/suggestions", tags=["suggestions"])


@router.post("/cache/clear")
async def clear_cache(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Forget the caller's cached suggestions; the next analytics call regenerates."""
    service = factory.create_suggestion_service()
    await service.clear_cache(build_session_ctx(user))
    return {"message": "Suggestion cache cleared", "ok": True}
