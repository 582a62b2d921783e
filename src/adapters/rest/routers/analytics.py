"""Protected analytics endpoint: per-account mood statistics and suggestions."""

from fastapi import APIRouter, Depends

from factory import ServiceFactory
from adapters.rest.dependencies import (
    CurrentUser,
    build_session_ctx,
    get_current_user,
    get_factory,
)
from adapters.rest.schemas import AnalyticsOut

router = APIRouter(tags=["analytics"])


@router.get("/analytics", response_model=AnalyticsOut)
async def get_analytics(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """
    Return the caller's aggregated mood analytics.

    Shows:
    - Entry count and per-trait averages (one decimal)
    - Mood category distribution
    - Trait trends over the ten most recent entries
    - Five most recent distinct mood descriptions
    - Personalised suggestions (cached until the recent context changes)
    """
    service = factory.create_analytics_service()
    report = await service.summarize(build_session_ctx(user))
    return AnalyticsOut.from_report(report)
