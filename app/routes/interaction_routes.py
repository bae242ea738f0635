# app/routes/interaction_routes.py
# Comments, likes and bookmarks on writings.
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError

from app.deps.admin import is_owner_or_admin
from app.models.notification_model import NotificationType
from app.models.user_model import User
from app.schemas.interaction_schemas import (
    CommentCreate, CommentOut, LikeOut, BookmarkOut, BookmarkWithWritingOut,
)
from app.storage import Storage, get_storage
from app.utils.enrichment import author_out, enrich_writing
from app.utils.notifications import notify
from app.utils.token_utils import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["interactions"])


async def _get_writing_or_404(storage: Storage, writing_id: int):
    writing = await storage.get_writing(writing_id)
    if not writing:
        raise HTTPException(status_code=404, detail="Writing not found")
    return writing


async def _comment_to_out(storage: Storage, comment) -> CommentOut:
    author = await storage.get_user(comment.user_id)
    return CommentOut(
        id=comment.id,
        user_id=comment.user_id,
        writing_id=comment.writing_id,
        content=comment.content,
        created_at=comment.created_at,
        author=author_out(author),
    )


# ------------------------------
# Comments
# ------------------------------
@router.get("/writings/{writing_id}/comments", response_model=List[CommentOut])
async def list_comments(writing_id: int, storage: Storage = Depends(get_storage)):
    comments = await storage.get_comments_by_writing(writing_id)
    return [await _comment_to_out(storage, c) for c in comments]


@router.post(
    "/writings/{writing_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    writing_id: int,
    payload: CommentCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    writing = await _get_writing_or_404(storage, writing_id)

    comment = await storage.create_comment({
        "user_id": user.id,
        "writing_id": writing.id,
        "content": payload.content,
    })
    await notify(
        storage,
        recipient_id=writing.user_id,
        actor_id=user.id,
        type=NotificationType.COMMENT,
        message=f'{user.full_name} commented on your writing "{writing.title}"',
        metadata={"commentId": comment.id, "writingId": writing.id, "commenterId": user.id},
    )
    await storage.commit()
    return await _comment_to_out(storage, comment)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    comment = await storage.get_comment(comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")

    if not is_owner_or_admin(user, comment.user_id):
        raise HTTPException(status_code=403, detail="Unauthorized to delete this comment")

    await storage.delete_comment(comment_id)
    await storage.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ------------------------------
# Likes
# ------------------------------
@router.post("/writings/{writing_id}/like", response_model=LikeOut, status_code=status.HTTP_201_CREATED)
async def like_writing(
    writing_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    writing = await _get_writing_or_404(storage, writing_id)

    if await storage.get_like(user.id, writing.id):
        raise HTTPException(status_code=400, detail="Already liked")

    try:
        like = await storage.create_like({"user_id": user.id, "writing_id": writing.id})
        await notify(
            storage,
            recipient_id=writing.user_id,
            actor_id=user.id,
            type=NotificationType.LIKE,
            message=f'{user.full_name} liked your writing "{writing.title}"',
            metadata={"likeId": like.id, "writingId": writing.id, "likerId": user.id},
        )
        await storage.commit()
    except IntegrityError:
        # the unique (user, writing) constraint caught a concurrent duplicate
        await storage.rollback()
        raise HTTPException(status_code=400, detail="Already liked")
    return like


@router.delete("/writings/{writing_id}/like", status_code=status.HTTP_204_NO_CONTENT)
async def unlike_writing(
    writing_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    await _get_writing_or_404(storage, writing_id)

    if not await storage.delete_like(user.id, writing_id):
        raise HTTPException(status_code=404, detail="Like not found")
    await storage.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ------------------------------
# Bookmarks
# ------------------------------
@router.post(
    "/writings/{writing_id}/bookmark",
    response_model=BookmarkOut,
    status_code=status.HTTP_201_CREATED,
)
async def bookmark_writing(
    writing_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    writing = await _get_writing_or_404(storage, writing_id)

    if await storage.get_bookmark(user.id, writing.id):
        raise HTTPException(status_code=400, detail="Already bookmarked")

    try:
        bookmark = await storage.create_bookmark({"user_id": user.id, "writing_id": writing.id})
        await notify(
            storage,
            recipient_id=writing.user_id,
            actor_id=user.id,
            type=NotificationType.BOOKMARK,
            message=f'{user.full_name} bookmarked your writing "{writing.title}"',
            metadata={"bookmarkId": bookmark.id, "writingId": writing.id, "bookmarkerId": user.id},
        )
        await storage.commit()
    except IntegrityError:
        await storage.rollback()
        raise HTTPException(status_code=400, detail="Already bookmarked")
    return bookmark


@router.delete("/writings/{writing_id}/bookmark", status_code=status.HTTP_204_NO_CONTENT)
async def remove_bookmark(
    writing_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    await _get_writing_or_404(storage, writing_id)

    if not await storage.delete_bookmark(user.id, writing_id):
        raise HTTPException(status_code=404, detail="Bookmark not found")
    await storage.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/bookmarks", response_model=List[BookmarkWithWritingOut])
async def my_bookmarks(
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    out = []
    for bookmark in await storage.get_bookmarks_by_user(user.id):
        writing = await storage.get_writing(bookmark.writing_id)
        if not writing:
            # the writing was deleted after it was bookmarked
            continue
        out.append(
            BookmarkWithWritingOut(
                id=bookmark.id,
                user_id=bookmark.user_id,
                writing_id=bookmark.writing_id,
                created_at=bookmark.created_at,
                writing=await enrich_writing(storage, writing),
            )
        )
    return out
