from fastapi import Depends, HTTPException, status
from jose import JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi.security import OAuth2PasswordBearer

from app import config
from app.models.user_model import User
from app.storage import Storage, get_storage

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login")
# same scheme, but anonymous callers fall through as None
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login", auto_error=False)


def _get_secret_key() -> str:
    secret = config.SECRET_KEY
    if not secret:
        # Fail fast with a clear message instead of a generic 500
        raise RuntimeError("SECRET_KEY is not configured in the backend environment")
    if len(secret) < 32:
        raise RuntimeError("SECRET_KEY is too short; use at least 32 characters")
    return secret


def create_access_token(user: User) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {
        "id": user.id,         # what get_current_user expects
        "sub": user.username,  # helpful for auditing/logs
        "exp": expire,
    }
    try:
        return jwt.encode(to_encode, _get_secret_key(), algorithm=config.ALGORITHM)
    except JWTError as e:
        raise RuntimeError(f"JWT encode failed: {e}")


def _decode_user_id(token: str) -> Optional[int]:
    try:
        payload = jwt.decode(token, _get_secret_key(), algorithms=[config.ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("id")
    return int(user_id) if user_id is not None else None


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    storage: Storage = Depends(get_storage),
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    user_id = _decode_user_id(token)
    if user_id is None:
        raise credentials_exception

    user = await storage.get_user(user_id)
    if not user:
        raise credentials_exception

    return user  # Returns SQLAlchemy user model


async def get_current_user_optional(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    storage: Storage = Depends(get_storage),
) -> Optional[User]:
    if not token:
        return None
    user_id = _decode_user_id(token)
    if user_id is None:
        return None
    return await storage.get_user(user_id)
