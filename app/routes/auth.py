import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from passlib.hash import bcrypt
from sqlalchemy.exc import IntegrityError

from app.config import AUTH_RATE_LIMIT
from app.limiter import limiter
from app.models.user_model import User
from app.schemas.user_schemas import UserCreate, UserOut, UserLogin, AuthResponse
from app.storage import Storage, get_storage
from app.utils.token_utils import create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        access_token=create_access_token(user),
        user=UserOut.model_validate(user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(AUTH_RATE_LIMIT)
async def register(request: Request, payload: UserCreate, storage: Storage = Depends(get_storage)):
    email_norm = str(payload.email).strip().lower()

    if await storage.get_user_by_username(payload.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    if await storage.get_user_by_email(email_norm):
        raise HTTPException(status_code=400, detail="Email already exists")

    try:
        user = await storage.create_user({
            "username": payload.username,
            "password": bcrypt.hash(payload.password),
            "full_name": payload.full_name,
            "email": email_norm,  # store normalized email
            "bio": payload.bio,
            "profile_image": payload.profile_image,
        })
        await storage.commit()
    except IntegrityError:
        # lost a race against another signup with the same name/email
        await storage.rollback()
        raise HTTPException(status_code=400, detail="Username or email already exists")

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return _auth_response(user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(AUTH_RATE_LIMIT)
async def login(request: Request, payload: UserLogin, storage: Storage = Depends(get_storage)):
    if not payload.username.strip() or not payload.password.strip():
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = await storage.get_user_by_username(payload.username)
    if not user or not bcrypt.verify(payload.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return _auth_response(user)


@router.post("/logout")
async def logout():
    # Tokens are stateless; the client drops its copy.
    return {"message": "Logged out"}


@router.get("/user", response_model=UserOut)
async def current_user(user: User = Depends(get_current_user)):
    return user
