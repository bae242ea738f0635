from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.base import CamelModel
from app.schemas.writing_schemas import AuthorOut, EnrichedWritingOut


class CommentCreate(CamelModel):
    content: str = Field(min_length=1, max_length=5000)


class CommentOut(CamelModel):
    id: int
    user_id: int
    writing_id: int
    content: str
    created_at: datetime
    author: Optional[AuthorOut] = None


class LikeOut(CamelModel):
    id: int
    user_id: int
    writing_id: int
    created_at: datetime


class BookmarkOut(CamelModel):
    id: int
    user_id: int
    writing_id: int
    created_at: datetime


class BookmarkWithWritingOut(BookmarkOut):
    writing: EnrichedWritingOut
