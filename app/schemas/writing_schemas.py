from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.base import CamelModel


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    # keep order, drop blanks
    return [t.strip() for t in tags if t and t.strip()]


class AuthorOut(CamelModel):
    id: int
    username: str
    full_name: str
    profile_image: Optional[str] = None


class AuthorDetailOut(AuthorOut):
    bio: Optional[str] = None


class WritingStats(CamelModel):
    likes: int = 0
    comments: int = 0


class UserInteraction(CamelModel):
    liked: bool = False
    bookmarked: bool = False


class WritingOut(CamelModel):
    id: int
    user_id: int
    title: str
    content: str
    description: str
    cover_image: Optional[str] = None
    category: str
    tags: Optional[List[str]] = None
    is_featured: bool = False
    read_time: int
    created_at: datetime
    updated_at: datetime


class EnrichedWritingOut(WritingOut):
    author: Optional[AuthorOut] = None
    stats: WritingStats


class WritingDetailOut(WritingOut):
    author: Optional[AuthorDetailOut] = None
    stats: WritingStats
    user_interaction: UserInteraction


class WritingCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    description: str = Field(min_length=1)
    cover_image: Optional[str] = None
    category: str = Field(min_length=1)
    tags: Optional[List[str]] = None
    # estimated from the content when omitted
    read_time: Optional[int] = Field(default=None, ge=1)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class WritingUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = Field(default=None, min_length=1)
    cover_image: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1)
    tags: Optional[List[str]] = None
    read_time: Optional[int] = Field(default=None, ge=1)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v):
        return _clean_tags(v)


class FeatureToggleIn(CamelModel):
    feature: bool
