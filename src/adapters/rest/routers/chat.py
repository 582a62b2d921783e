"""Protected chat endpoints: history and send."""

from fastapi import APIRouter, Depends, HTTPException

from factory import ServiceFactory
from domain.exceptions import InvalidInputError
from adapters.rest.dependencies import (
    CurrentUser,
    build_session_ctx,
    get_current_user,
    get_factory,
)
from adapters.rest.schemas import ChatBody, MessageOut

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("", response_model=list[MessageOut])
async def get_history(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_chat_service()
    messages = await service.history(build_session_ctx(user))
    return [MessageOut.from_message(m) for m in messages]


@router.post("", response_model=MessageOut)
async def send_message(
    body: ChatBody,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_chat_service()
    try:
        reply = await service.send(build_session_ctx(user), body.message)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return MessageOut.from_message(reply)
