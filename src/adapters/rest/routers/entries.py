"""Protected journal entry endpoints (multipart upload for new entries)."""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from factory import ServiceFactory
from domain.exceptions import EntryNotFoundError, ImageStorageError, InvalidInputError
from application.dto import NewEntryRequest
from adapters.rest.dependencies import (
    CurrentUser,
    build_session_ctx,
    get_current_user,
    get_factory,
)
from adapters.rest.schemas import EntryOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])


def _parse_tags(raw: Optional[str]) -> list[str]:
    """Tags arrive as a JSON array string in the multipart form."""
    if not raw:
        return []
    try:
        tags = json.loads(raw)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Tags must be a JSON array of strings.")
    if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
        raise HTTPException(status_code=400, detail="Tags must be a JSON array of strings.")
    return tags


@router.get("", response_model=list[EntryOut])
async def list_entries(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_entry_service()
    entries = await service.list_entries(build_session_ctx(user))
    return [EntryOut.from_entry(e) for e in entries]


@router.post("", response_model=EntryOut, status_code=201)
async def create_entry(
    image: Optional[UploadFile] = File(None),
    caption: str = Form(""),
    tags: Optional[str] = Form(None),
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    data = await image.read() if image is not None else b""
    request = NewEntryRequest(
        image=data,
        filename=(image.filename if image is not None else "") or "",
        content_type=(image.content_type if image is not None else "") or "",
        caption=caption,
        tags=_parse_tags(tags),
    )

    service = factory.create_entry_service()
    try:
        entry = await service.create_entry(build_session_ctx(user), request)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ImageStorageError:
        logger.exception("Image upload failed for user %d", user.user_id)
        raise HTTPException(status_code=500, detail="Failed to upload image")
    return EntryOut.from_entry(entry)


@router.delete("")
async def delete_entry_by_query(
    id: Optional[int] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Delete via ``?id=``; a missing id is a client error."""
    if id is None:
        raise HTTPException(status_code=400, detail="Post ID is required")
    return await _delete(id, user, factory)


@router.get("/{entry_id}", response_model=EntryOut)
async def get_entry(
    entry_id: int,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_entry_service()
    try:
        entry = await service.get_entry(build_session_ctx(user), entry_id)
    except EntryNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return EntryOut.from_entry(entry)


@router.delete("/{entry_id}")
async def delete_entry(
    entry_id: int,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    return await _delete(entry_id, user, factory)


async def _delete(entry_id: int, user: CurrentUser, factory: ServiceFactory) -> dict:
    service = factory.create_entry_service()
    try:
        await service.delete_entry(build_session_ctx(user), entry_id)
    except EntryNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")
    return {"message": "Post deleted successfully"}
