from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime

from app.schemas.base import CamelModel

class UserCreate(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=4)
    full_name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    bio: Optional[str] = None
    profile_image: Optional[str] = None

    @field_validator("username", "full_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

class UserLogin(BaseModel):
    username: str
    password: str

class UserOut(CamelModel):
    """A user without the password hash."""
    id: int
    username: str
    full_name: str
    email: str
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    is_admin: bool = False
    created_at: datetime

class AuthResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut

class UserStats(CamelModel):
    writings_count: int
    followers_count: int
    following_count: int

class UserProfileOut(UserOut):
    stats: UserStats
    is_following: bool = False

class ProfileUpdate(CamelModel):
    # All optional so the client can send only what changed
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    bio: Optional[str] = None
    profile_image: Optional[str] = None

class FollowUserOut(CamelModel):
    id: int
    username: str
    full_name: str
    profile_image: Optional[str] = None
    bio: Optional[str] = None
    followed_at: datetime

class FollowOut(CamelModel):
    id: int
    follower_id: int
    following_id: int
    created_at: datetime

class AdminUserUpdate(CamelModel):
    is_admin: bool
