# app/routes/user_routes.py
# Profiles and follows.
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError

from app.models.notification_model import NotificationType
from app.models.user_model import User
from app.schemas.user_schemas import (
    UserOut, UserProfileOut, UserStats, ProfileUpdate, FollowOut, FollowUserOut,
)
from app.storage import Storage, get_storage
from app.utils.notifications import notify
from app.utils.token_utils import get_current_user, get_current_user_optional

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


async def _get_user_or_404(storage: Storage, user_id: int) -> User:
    user = await storage.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _follow_user_out(user: User, follow) -> FollowUserOut:
    return FollowUserOut(
        id=user.id,
        username=user.username,
        full_name=user.full_name,
        profile_image=user.profile_image,
        bio=user.bio,
        followed_at=follow.created_at,
    )


# Registered before /{user_id} so "profile" is never parsed as an id
@router.put("/profile", response_model=UserOut)
async def update_profile(
    payload: ProfileUpdate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    # Only allow updating certain fields; full name can't be blanked
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("full_name", "") is None:
        changes.pop("full_name")

    updated = await storage.update_user(user.id, changes)
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    await storage.commit()
    return updated


@router.get("/{user_id}", response_model=UserProfileOut)
async def get_profile(
    user_id: int,
    storage: Storage = Depends(get_storage),
    viewer: Optional[User] = Depends(get_current_user_optional),
):
    user = await _get_user_or_404(storage, user_id)

    is_following = False
    if viewer is not None:
        is_following = await storage.get_follow(viewer.id, user_id) is not None

    stats = UserStats(
        writings_count=await storage.count_writings_by_user(user_id),
        followers_count=len(await storage.get_followers(user_id)),
        following_count=len(await storage.get_following(user_id)),
    )
    base = UserOut.model_validate(user).model_dump()
    return UserProfileOut(**base, stats=stats, is_following=is_following)


@router.post("/{user_id}/follow", response_model=FollowOut, status_code=status.HTTP_201_CREATED)
async def follow_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    # Can't follow yourself
    if user_id == user.id:
        raise HTTPException(status_code=400, detail="You cannot follow yourself")

    await _get_user_or_404(storage, user_id)

    if await storage.get_follow(user.id, user_id):
        raise HTTPException(status_code=400, detail="Already following")

    try:
        follow = await storage.create_follow({"follower_id": user.id, "following_id": user_id})
        await notify(
            storage,
            recipient_id=user_id,
            actor_id=user.id,
            type=NotificationType.FOLLOW,
            message=f"{user.full_name} started following you",
            metadata={"followId": follow.id, "followerId": user.id},
        )
        await storage.commit()
    except IntegrityError:
        await storage.rollback()
        raise HTTPException(status_code=400, detail="Already following")
    return follow


@router.delete("/{user_id}/follow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_user(
    user_id: int,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    if not await storage.delete_follow(user.id, user_id):
        raise HTTPException(status_code=404, detail="Follow not found")
    await storage.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/followers", response_model=List[FollowUserOut])
async def list_followers(user_id: int, storage: Storage = Depends(get_storage)):
    await _get_user_or_404(storage, user_id)

    out = []
    for follow in await storage.get_followers(user_id):
        follower = await storage.get_user(follow.follower_id)
        if follower:
            out.append(_follow_user_out(follower, follow))
    return out


@router.get("/{user_id}/following", response_model=List[FollowUserOut])
async def list_following(user_id: int, storage: Storage = Depends(get_storage)):
    await _get_user_or_404(storage, user_id)

    out = []
    for follow in await storage.get_following(user_id):
        followed = await storage.get_user(follow.following_id)
        if followed:
            out.append(_follow_user_out(followed, follow))
    return out
