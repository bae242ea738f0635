from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.base import CamelModel
from app.schemas.writing_schemas import EnrichedWritingOut, WritingOut
from app.utils.time_utils import ensure_aware


class ChallengeCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    end_date: datetime
    word_limit: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return ensure_aware(v)


class ChallengeUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)
    end_date: Optional[datetime] = None
    word_limit: Optional[str] = None

    @field_validator("end_date")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v)


class ChallengeOut(CamelModel):
    id: int
    title: str
    description: str
    end_date: datetime
    word_limit: Optional[str] = None
    created_at: datetime


class ChallengeSummaryOut(ChallengeOut):
    entries_count: int = 0


class ChallengeEntryOut(CamelModel):
    id: int
    challenge_id: int
    writing_id: int
    rank: Optional[int] = None
    created_at: datetime


class EnrichedEntryOut(ChallengeEntryOut):
    writing: EnrichedWritingOut


class ChallengeDetailOut(ChallengeOut):
    entries: List[EnrichedEntryOut] = []


class EntrySubmissionOut(ChallengeEntryOut):
    writing: WritingOut


class RankUpdate(CamelModel):
    rank: int = Field(ge=1)
