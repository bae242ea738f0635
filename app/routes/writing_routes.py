import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.deps.admin import is_owner_or_admin
from app.models.user_model import User
from app.schemas.writing_schemas import (
    WritingCreate, WritingUpdate, WritingOut, EnrichedWritingOut, WritingDetailOut,
)
from app.storage import Storage, get_storage
from app.utils.enrichment import enrich_writings, writing_detail, estimate_read_time
from app.utils.token_utils import get_current_user, get_current_user_optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/writings", tags=["writings"])

NULLABLE_FIELDS = {"cover_image", "tags"}


@router.get("", response_model=List[EnrichedWritingOut])
async def list_writings(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    featured: Optional[str] = None,
    user_id: Optional[int] = Query(None, alias="userId"),
    search: Optional[str] = None,
    storage: Storage = Depends(get_storage),
):
    # Only one filter applies; the first one present wins.
    if featured == "true":
        writings = await storage.get_featured_writings()
    elif category:
        writings = await storage.get_writings_by_category(category)
    elif tag:
        writings = await storage.get_writings_by_tag(tag)
    elif user_id:
        writings = await storage.get_writings_by_user(user_id)
    elif search:
        writings = await storage.search_writings(search)
    else:
        writings = await storage.get_all_writings()

    return await enrich_writings(storage, writings)


@router.get("/{writing_id}", response_model=WritingDetailOut)
async def get_writing(
    writing_id: int,
    storage: Storage = Depends(get_storage),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    writing = await storage.get_writing(writing_id)
    if not writing:
        raise HTTPException(status_code=404, detail="Writing not found")
    return await writing_detail(storage, writing, viewer)


@router.post("", response_model=WritingOut, status_code=status.HTTP_201_CREATED)
async def create_writing(
    payload: WritingCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    data = payload.model_dump()
    if data["read_time"] is None:
        data["read_time"] = estimate_read_time(payload.content)

    writing = await storage.create_writing({**data, "user_id": user.id})
    await storage.commit()
    logger.info("User %s created writing %s", user.id, writing.id)
    return writing


@router.put("/{writing_id}", response_model=WritingOut)
async def update_writing(
    writing_id: int,
    payload: WritingUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    writing = await storage.get_writing(writing_id)
    if not writing:
        raise HTTPException(status_code=404, detail="Writing not found")

    # Check if user is the author or admin
    if not is_owner_or_admin(user, writing.user_id):
        raise HTTPException(status_code=403, detail="Unauthorized to update this writing")

    # only cover image and tags may be cleared with an explicit null
    changes = {
        k: v for k, v in payload.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    updated = await storage.update_writing(writing_id, changes)
    await storage.commit()
    return updated


@router.delete("/{writing_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_writing(
    writing_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    writing = await storage.get_writing(writing_id)
    if not writing:
        raise HTTPException(status_code=404, detail="Writing not found")

    if not is_owner_or_admin(user, writing.user_id):
        raise HTTPException(status_code=403, detail="Unauthorized to delete this writing")

    await storage.delete_writing(writing_id)
    await storage.commit()
    logger.info("User %s deleted writing %s", user.id, writing_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
