from sqlalchemy import Column, Integer, String, Text, ForeignKey

from app.database import Base, UTCDateTime
from app.utils.time_utils import utcnow

class Challenge(Base):
    __tablename__ = "challenges"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    end_date = Column(UTCDateTime(), nullable=False)
    word_limit = Column(String, nullable=True)  # e.g. "1000-2500"

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)


class ChallengeEntry(Base):
    __tablename__ = "challenge_entries"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    challenge_id = Column(Integer, ForeignKey("challenges.id"), nullable=False, index=True)
    # no FK: the writing may be deleted after submission
    writing_id = Column(Integer, nullable=False, index=True)
    rank = Column(Integer, nullable=True)  # assigned later by an admin

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
