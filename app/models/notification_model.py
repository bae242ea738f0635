from sqlalchemy import Column, Integer, Text, Boolean, ForeignKey, JSON, Enum as SqlEnum
from app.database import Base, UTCDateTime
from app.utils.time_utils import utcnow
import enum

class NotificationType(str, enum.Enum):
    COMMENT = "comment"
    LIKE = "like"
    BOOKMARK = "bookmark"
    FOLLOW = "follow"
    CHALLENGE_RANK = "challenge_rank"
    FEATURED = "featured"

class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    # recipient
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(
        SqlEnum(
            NotificationType,
            name="notification_type",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False, server_default="false")
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False, index=True)
