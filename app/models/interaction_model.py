# app/models/interaction_model.py
from sqlalchemy import Column, Integer, Text, ForeignKey, UniqueConstraint

from app.database import Base, UTCDateTime
from app.utils.time_utils import utcnow

# writing_id columns carry no foreign key: deleting a writing leaves its
# comments, likes and bookmarks in place, and readers skip the missing rows.


class Comment(Base):
    __tablename__ = "comments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    writing_id = Column(Integer, nullable=False, index=True)
    content = Column(Text, nullable=False)

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)


class Like(Base):
    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "writing_id", name="uq_likes_user_writing"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    writing_id = Column(Integer, nullable=False, index=True)

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)


class Bookmark(Base):
    __tablename__ = "bookmarks"
    __table_args__ = (
        UniqueConstraint("user_id", "writing_id", name="uq_bookmarks_user_writing"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    writing_id = Column(Integer, nullable=False, index=True)

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)


class Follow(Base):
    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_pair"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    follower_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    following_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
