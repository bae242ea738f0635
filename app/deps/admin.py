# app/deps/admin.py
from fastapi import Depends, HTTPException, status
from app.models.user_model import User
from app.utils.token_utils import get_current_user


def is_owner_or_admin(user: User, owner_id: int) -> bool:
    return user.id == owner_id or bool(user.is_admin)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Requires the authenticated user to be an administrator.
    Raises 403 if not.
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user
