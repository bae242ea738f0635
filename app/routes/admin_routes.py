# app/routes/admin_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.deps.admin import require_admin
from app.models.notification_model import NotificationType
from app.models.user_model import User
from app.schemas.user_schemas import UserOut, AdminUserUpdate
from app.schemas.writing_schemas import WritingOut, EnrichedWritingOut, FeatureToggleIn
from app.storage import Storage, get_storage
from app.utils.enrichment import enrich_writings
from app.utils.notifications import notify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=List[UserOut])
async def list_users(
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_admin),
):
    return await storage.get_all_users()


@router.patch("/users/{user_id}", response_model=UserOut)
async def set_admin_flag(
    user_id: int,
    payload: AdminUserUpdate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    if user_id == admin.id and not payload.is_admin:
        raise HTTPException(status_code=400, detail="You cannot revoke your own admin access")

    user = await storage.update_user(user_id, {"is_admin": payload.is_admin})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    await storage.commit()
    logger.info("Admin %s set is_admin=%s on user %s", admin.id, payload.is_admin, user_id)
    return user


@router.get("/writings", response_model=List[EnrichedWritingOut])
async def list_all_writings(
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_admin),
):
    return await enrich_writings(storage, await storage.get_all_writings())


@router.put("/writings/{writing_id}/feature", response_model=WritingOut)
async def feature_writing(
    writing_id: int,
    payload: FeatureToggleIn,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    writing = await storage.get_writing(writing_id)
    if not writing:
        raise HTTPException(status_code=404, detail="Writing not found")

    updated = await storage.update_writing(writing_id, {"is_featured": payload.feature})

    # Notify the writing author about being featured
    if payload.feature:
        await notify(
            storage,
            recipient_id=updated.user_id,
            actor_id=admin.id,
            type=NotificationType.FEATURED,
            message=f'Your writing "{updated.title}" has been featured!',
            metadata={"writingId": updated.id},
        )
    await storage.commit()
    return updated
