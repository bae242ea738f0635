# app/utils/enrichment.py
# Mappers that join author and stats data onto stored rows.
from typing import Optional, List

from app.models.user_model import User
from app.models.writing_model import Writing
from app.models.challenge_model import ChallengeEntry
from app.schemas.writing_schemas import (
    AuthorOut, AuthorDetailOut, WritingStats, UserInteraction,
    WritingOut, EnrichedWritingOut, WritingDetailOut,
)
from app.schemas.challenge_schemas import EnrichedEntryOut
from app.storage import Storage

# Average reading speed used when the author doesn't give a read time
WORDS_PER_MINUTE = 225


def estimate_read_time(content: str) -> int:
    words = len((content or "").split())
    return max(1, -(-words // WORDS_PER_MINUTE))


def author_out(user: Optional[User]) -> Optional[AuthorOut]:
    return AuthorOut.model_validate(user) if user else None


async def writing_stats(storage: Storage, writing_id: int) -> WritingStats:
    return WritingStats(
        likes=await storage.count_likes(writing_id),
        comments=await storage.count_comments(writing_id),
    )


async def enrich_writing(storage: Storage, writing: Writing) -> EnrichedWritingOut:
    author = await storage.get_user(writing.user_id)
    base = WritingOut.model_validate(writing).model_dump()
    return EnrichedWritingOut(
        **base,
        author=author_out(author),
        stats=await writing_stats(storage, writing.id),
    )


async def enrich_writings(storage: Storage, writings: List[Writing]) -> List[EnrichedWritingOut]:
    return [await enrich_writing(storage, w) for w in writings]


async def writing_detail(
    storage: Storage, writing: Writing, viewer: Optional[User]
) -> WritingDetailOut:
    author = await storage.get_user(writing.user_id)

    interaction = UserInteraction()
    if viewer is not None:
        interaction = UserInteraction(
            liked=await storage.get_like(viewer.id, writing.id) is not None,
            bookmarked=await storage.get_bookmark(viewer.id, writing.id) is not None,
        )

    base = WritingOut.model_validate(writing).model_dump()
    return WritingDetailOut(
        **base,
        author=AuthorDetailOut.model_validate(author) if author else None,
        stats=await writing_stats(storage, writing.id),
        user_interaction=interaction,
    )


async def enrich_entries(storage: Storage, entries: List[ChallengeEntry]) -> List[EnrichedEntryOut]:
    """Join each entry to its writing, skipping entries whose writing is gone,
    ranked entries first by rank, then unranked ones by likes."""
    out: List[EnrichedEntryOut] = []
    for entry in entries:
        writing = await storage.get_writing(entry.writing_id)
        if not writing:
            continue
        out.append(
            EnrichedEntryOut(
                id=entry.id,
                challenge_id=entry.challenge_id,
                writing_id=entry.writing_id,
                rank=entry.rank,
                created_at=entry.created_at,
                writing=await enrich_writing(storage, writing),
            )
        )
    out.sort(key=entry_sort_key)
    return out


def entry_sort_key(entry: EnrichedEntryOut):
    if entry.rank is not None:
        return (0, entry.rank, 0)
    return (1, 0, -entry.writing.stats.likes)
