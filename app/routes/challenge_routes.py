# app/routes/challenge_routes.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from app.deps.admin import require_admin
from app.models.notification_model import NotificationType
from app.models.user_model import User
from app.schemas.challenge_schemas import (
    ChallengeCreate, ChallengeUpdate, ChallengeOut, ChallengeSummaryOut, ChallengeDetailOut,
    ChallengeEntryOut, EntrySubmissionOut, RankUpdate,
)
from app.schemas.writing_schemas import WritingCreate, WritingOut
from app.storage import Storage, get_storage
from app.utils.enrichment import enrich_entries, estimate_read_time
from app.utils.notifications import notify
from app.utils.time_utils import utcnow
from app.utils.token_utils import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/challenges", tags=["challenges"])


async def _get_challenge_or_404(storage: Storage, challenge_id: int):
    challenge = await storage.get_challenge(challenge_id)
    if not challenge:
        raise HTTPException(status_code=404, detail="Challenge not found")
    return challenge


@router.get("", response_model=List[ChallengeSummaryOut])
async def list_challenges(storage: Storage = Depends(get_storage)):
    out = []
    for challenge in await storage.get_all_challenges():
        base = ChallengeOut.model_validate(challenge).model_dump()
        out.append(
            ChallengeSummaryOut(
                **base,
                entries_count=await storage.count_challenge_entries(challenge.id),
            )
        )
    return out


@router.get("/{challenge_id}", response_model=ChallengeDetailOut)
async def get_challenge(challenge_id: int, storage: Storage = Depends(get_storage)):
    challenge = await _get_challenge_or_404(storage, challenge_id)

    entries = await storage.get_challenge_entries_by_challenge(challenge_id)
    base = ChallengeOut.model_validate(challenge).model_dump()
    return ChallengeDetailOut(**base, entries=await enrich_entries(storage, entries))


@router.post("", response_model=ChallengeOut, status_code=status.HTTP_201_CREATED)
async def create_challenge(
    payload: ChallengeCreate,
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_admin),
):
    challenge = await storage.create_challenge(payload.model_dump())
    await storage.commit()
    logger.info("Challenge %s created: %s", challenge.id, challenge.title)
    return challenge


@router.put("/{challenge_id}", response_model=ChallengeOut)
async def update_challenge(
    challenge_id: int,
    payload: ChallengeUpdate,
    storage: Storage = Depends(get_storage),
    _admin: User = Depends(require_admin),
):
    await _get_challenge_or_404(storage, challenge_id)

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items()
               if v is not None or k == "word_limit"}
    challenge = await storage.update_challenge(challenge_id, changes)
    await storage.commit()
    return challenge


@router.post(
    "/{challenge_id}/entries",
    response_model=EntrySubmissionOut,
    status_code=status.HTTP_201_CREATED,
)
async def submit_entry(
    challenge_id: int,
    payload: WritingCreate,
    storage: Storage = Depends(get_storage),
    user: User = Depends(get_current_user),
):
    challenge = await _get_challenge_or_404(storage, challenge_id)

    # Check if challenge has ended
    if utcnow() > challenge.end_date:
        raise HTTPException(status_code=400, detail="Challenge has ended")

    data = payload.model_dump()
    if data["read_time"] is None:
        data["read_time"] = estimate_read_time(payload.content)

    try:
        entry, writing = await storage.submit_challenge_entry(
            challenge_id, {**data, "user_id": user.id}
        )
    except SQLAlchemyError:
        raise HTTPException(status_code=500, detail="Failed to submit entry")

    return EntrySubmissionOut(
        **ChallengeEntryOut.model_validate(entry).model_dump(),
        writing=WritingOut.model_validate(writing),
    )


@router.put("/{challenge_id}/entries/{entry_id}/rank", response_model=ChallengeEntryOut)
async def rank_entry(
    challenge_id: int,
    entry_id: int,
    payload: RankUpdate,
    storage: Storage = Depends(get_storage),
    admin: User = Depends(require_admin),
):
    challenge = await _get_challenge_or_404(storage, challenge_id)

    entry = await storage.get_challenge_entry(entry_id)
    if not entry or entry.challenge_id != challenge_id:
        raise HTTPException(status_code=404, detail="Entry not found for this challenge")

    updated = await storage.update_challenge_entry_rank(entry_id, payload.rank)

    # Notify the entry author
    writing = await storage.get_writing(entry.writing_id)
    if writing:
        await notify(
            storage,
            recipient_id=writing.user_id,
            actor_id=admin.id,
            type=NotificationType.CHALLENGE_RANK,
            message=f'Your entry in "{challenge.title}" challenge has been ranked #{payload.rank}!',
            metadata={
                "challengeId": challenge_id,
                "entryId": entry_id,
                "writingId": writing.id,
                "rank": payload.rank,
            },
        )
    await storage.commit()
    return updated
