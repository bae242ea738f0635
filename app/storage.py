# app/storage.py
"""
Repository over the relational store.

Every entity gets the same small vocabulary:

* ``get_x(id)`` returns the row or ``None``; it never raises for a missing id.
* ``create_x(data)`` inserts and flushes so the id is assigned.
* ``update_x(id, changes)`` merges fields onto the row, ``None`` if absent.
* ``delete_x(...)`` returns whether a row was actually removed.

Writes are flushed, not committed. Routes call :meth:`Storage.commit` once
their request is done so related rows (a like and its notification, say)
land together.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, List, Tuple

from fastapi import Depends
from sqlalchemy import select, func, delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_async_session
from app.models.user_model import User
from app.models.writing_model import Writing
from app.models.interaction_model import Comment, Like, Bookmark, Follow
from app.models.challenge_model import Challenge, ChallengeEntry
from app.models.notification_model import Notification, NotificationType
from app.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


def fold_case(value: str) -> str:
    # Python-side so non-ASCII letters fold too (SQLite's lower() is ASCII only)
    return value.strip().lower()


def _user_keys(data: Mapping[str, Any]) -> dict:
    keys = {}
    if data.get("username") is not None:
        keys["username_key"] = fold_case(data["username"])
    if data.get("email") is not None:
        keys["email_key"] = fold_case(data["email"])
    return keys


class Storage:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

    async def _add(self, obj):
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def _merge(self, obj, changes: Mapping[str, Any]):
        for field, value in changes.items():
            setattr(obj, field, value)
        await self.session.flush()
        return obj

    async def _all(self, stmt) -> list:
        return list((await self.session.execute(stmt)).scalars().all())

    async def _count(self, stmt) -> int:
        return int((await self.session.execute(stmt)).scalar_one() or 0)

    # ------------------------------
    # Users
    # ------------------------------
    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username_key == fold_case(username))
        return (await self.session.execute(stmt)).scalars().first()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email_key == fold_case(email))
        return (await self.session.execute(stmt)).scalars().first()

    async def create_user(self, data: Mapping[str, Any]) -> User:
        return await self._add(User(**data, **_user_keys(data)))

    async def update_user(self, user_id: int, changes: Mapping[str, Any]) -> Optional[User]:
        user = await self.get_user(user_id)
        if not user:
            return None
        return await self._merge(user, {**changes, **_user_keys(changes)})

    async def get_all_users(self) -> List[User]:
        return await self._all(select(User).order_by(User.id))

    # ------------------------------
    # Writings
    # ------------------------------
    async def get_writing(self, writing_id: int) -> Optional[Writing]:
        return await self.session.get(Writing, writing_id)

    async def get_all_writings(self) -> List[Writing]:
        return await self._all(select(Writing).order_by(Writing.id))

    async def get_writings_by_user(self, user_id: int) -> List[Writing]:
        return await self._all(
            select(Writing).where(Writing.user_id == user_id).order_by(Writing.id)
        )

    async def count_writings_by_user(self, user_id: int) -> int:
        return await self._count(
            select(func.count(Writing.id)).where(Writing.user_id == user_id)
        )

    async def get_featured_writings(self) -> List[Writing]:
        return await self._all(
            select(Writing).where(Writing.is_featured.is_(True)).order_by(Writing.id)
        )

    async def get_writings_by_category(self, category: str) -> List[Writing]:
        needle = fold_case(category)
        return [
            w for w in await self.get_all_writings()
            if fold_case(w.category or "") == needle
        ]

    async def get_writings_by_tag(self, tag: str) -> List[Writing]:
        # tags live in a JSON column, so match them here rather than in SQL
        needle = fold_case(tag)
        return [
            w for w in await self.get_all_writings()
            if any(fold_case(t) == needle for t in (w.tags or []))
        ]

    async def search_writings(self, query: str) -> List[Writing]:
        q = query.lower()

        def matches(w: Writing) -> bool:
            return (
                q in (w.title or "").lower()
                or q in (w.description or "").lower()
                or q in (w.content or "").lower()
                or q in (w.category or "").lower()
                or any(q in t.lower() for t in (w.tags or []))
            )

        return [w for w in await self.get_all_writings() if matches(w)]

    async def create_writing(self, data: Mapping[str, Any]) -> Writing:
        writing = Writing(**data)
        writing.is_featured = False
        return await self._add(writing)

    async def update_writing(self, writing_id: int, changes: Mapping[str, Any]) -> Optional[Writing]:
        writing = await self.get_writing(writing_id)
        if not writing:
            return None
        return await self._merge(writing, {**changes, "updated_at": utcnow()})

    async def delete_writing(self, writing_id: int) -> bool:
        # comments, likes, bookmarks and entries are left behind on purpose
        result = await self.session.execute(delete(Writing).where(Writing.id == writing_id))
        return result.rowcount > 0

    # ------------------------------
    # Comments
    # ------------------------------
    async def get_comment(self, comment_id: int) -> Optional[Comment]:
        return await self.session.get(Comment, comment_id)

    async def get_comments_by_writing(self, writing_id: int) -> List[Comment]:
        return await self._all(
            select(Comment).where(Comment.writing_id == writing_id).order_by(Comment.id)
        )

    async def count_comments(self, writing_id: int) -> int:
        return await self._count(
            select(func.count(Comment.id)).where(Comment.writing_id == writing_id)
        )

    async def create_comment(self, data: Mapping[str, Any]) -> Comment:
        return await self._add(Comment(**data))

    async def delete_comment(self, comment_id: int) -> bool:
        result = await self.session.execute(delete(Comment).where(Comment.id == comment_id))
        return result.rowcount > 0

    # ------------------------------
    # Likes
    # ------------------------------
    async def get_like(self, user_id: int, writing_id: int) -> Optional[Like]:
        stmt = select(Like).where(Like.user_id == user_id, Like.writing_id == writing_id)
        return (await self.session.execute(stmt)).scalars().first()

    async def get_likes_by_writing(self, writing_id: int) -> List[Like]:
        return await self._all(
            select(Like).where(Like.writing_id == writing_id).order_by(Like.id)
        )

    async def count_likes(self, writing_id: int) -> int:
        return await self._count(
            select(func.count(Like.id)).where(Like.writing_id == writing_id)
        )

    async def create_like(self, data: Mapping[str, Any]) -> Like:
        return await self._add(Like(**data))

    async def delete_like(self, user_id: int, writing_id: int) -> bool:
        result = await self.session.execute(
            delete(Like).where(Like.user_id == user_id, Like.writing_id == writing_id)
        )
        return result.rowcount > 0

    # ------------------------------
    # Bookmarks
    # ------------------------------
    async def get_bookmark(self, user_id: int, writing_id: int) -> Optional[Bookmark]:
        stmt = select(Bookmark).where(
            Bookmark.user_id == user_id, Bookmark.writing_id == writing_id
        )
        return (await self.session.execute(stmt)).scalars().first()

    async def get_bookmarks_by_user(self, user_id: int) -> List[Bookmark]:
        return await self._all(
            select(Bookmark).where(Bookmark.user_id == user_id).order_by(Bookmark.id)
        )

    async def create_bookmark(self, data: Mapping[str, Any]) -> Bookmark:
        return await self._add(Bookmark(**data))

    async def delete_bookmark(self, user_id: int, writing_id: int) -> bool:
        result = await self.session.execute(
            delete(Bookmark).where(
                Bookmark.user_id == user_id, Bookmark.writing_id == writing_id
            )
        )
        return result.rowcount > 0

    # ------------------------------
    # Follows
    # ------------------------------
    async def get_follow(self, follower_id: int, following_id: int) -> Optional[Follow]:
        stmt = select(Follow).where(
            Follow.follower_id == follower_id, Follow.following_id == following_id
        )
        return (await self.session.execute(stmt)).scalars().first()

    async def get_followers(self, user_id: int) -> List[Follow]:
        return await self._all(
            select(Follow).where(Follow.following_id == user_id).order_by(Follow.id)
        )

    async def get_following(self, user_id: int) -> List[Follow]:
        return await self._all(
            select(Follow).where(Follow.follower_id == user_id).order_by(Follow.id)
        )

    async def create_follow(self, data: Mapping[str, Any]) -> Follow:
        return await self._add(Follow(**data))

    async def delete_follow(self, follower_id: int, following_id: int) -> bool:
        result = await self.session.execute(
            delete(Follow).where(
                Follow.follower_id == follower_id, Follow.following_id == following_id
            )
        )
        return result.rowcount > 0

    # ------------------------------
    # Challenges
    # ------------------------------
    async def get_challenge(self, challenge_id: int) -> Optional[Challenge]:
        return await self.session.get(Challenge, challenge_id)

    async def get_all_challenges(self) -> List[Challenge]:
        return await self._all(select(Challenge).order_by(Challenge.id))

    async def create_challenge(self, data: Mapping[str, Any]) -> Challenge:
        return await self._add(Challenge(**data))

    async def update_challenge(self, challenge_id: int, changes: Mapping[str, Any]) -> Optional[Challenge]:
        challenge = await self.get_challenge(challenge_id)
        if not challenge:
            return None
        return await self._merge(challenge, changes)

    # ------------------------------
    # Challenge entries
    # ------------------------------
    async def get_challenge_entry(self, entry_id: int) -> Optional[ChallengeEntry]:
        return await self.session.get(ChallengeEntry, entry_id)

    async def get_challenge_entries_by_challenge(self, challenge_id: int) -> List[ChallengeEntry]:
        return await self._all(
            select(ChallengeEntry)
            .where(ChallengeEntry.challenge_id == challenge_id)
            .order_by(ChallengeEntry.id)
        )

    async def count_challenge_entries(self, challenge_id: int) -> int:
        return await self._count(
            select(func.count(ChallengeEntry.id)).where(ChallengeEntry.challenge_id == challenge_id)
        )

    async def create_challenge_entry(self, data: Mapping[str, Any]) -> ChallengeEntry:
        return await self._add(ChallengeEntry(**data))

    async def update_challenge_entry_rank(self, entry_id: int, rank: int) -> Optional[ChallengeEntry]:
        entry = await self.get_challenge_entry(entry_id)
        if not entry:
            return None
        return await self._merge(entry, {"rank": rank})

    async def submit_challenge_entry(
        self, challenge_id: int, writing_data: Mapping[str, Any]
    ) -> Tuple[ChallengeEntry, Writing]:
        """Create the writing and its entry in one transaction.

        Either both rows are committed or neither is.
        """
        try:
            writing = await self.create_writing(writing_data)
            entry = await self.create_challenge_entry(
                {"challenge_id": challenge_id, "writing_id": writing.id, "rank": None}
            )
            await self.session.commit()
        except SQLAlchemyError:
            logger.exception("Challenge entry for challenge %s failed, rolling back", challenge_id)
            await self.session.rollback()
            raise
        return entry, writing

    # ------------------------------
    # Notifications
    # ------------------------------
    async def get_notification(self, notification_id: int) -> Optional[Notification]:
        return await self.session.get(Notification, notification_id)

    async def get_notifications_by_user(self, user_id: int) -> List[Notification]:
        return await self._all(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )

    async def create_notification(
        self,
        user_id: int,
        type: NotificationType,
        message: str,
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Notification:
        return await self._add(
            Notification(
                user_id=user_id,
                type=NotificationType(type),
                message=message,
                meta=dict(metadata or {}),
            )
        )

    async def mark_notification_as_read(self, notification_id: int) -> Optional[Notification]:
        notification = await self.get_notification(notification_id)
        if not notification:
            return None
        return await self._merge(notification, {"is_read": True})

    async def mark_all_notifications_as_read(self, user_id: int) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount


async def get_storage(session: AsyncSession = Depends(get_async_session)) -> Storage:
    return Storage(session)
