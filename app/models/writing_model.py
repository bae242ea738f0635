from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, JSON

from app.database import Base, UTCDateTime
from app.utils.time_utils import utcnow

class Writing(Base):
    __tablename__ = "writings"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    cover_image = Column(String, nullable=True)
    category = Column(String, nullable=False, index=True)
    # ordered list of strings
    tags = Column(JSON, nullable=True)
    is_featured = Column(Boolean, default=False, nullable=False, server_default="false")
    read_time = Column(Integer, nullable=False)  # minutes

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
    updated_at = Column(UTCDateTime(), default=utcnow, onupdate=utcnow, nullable=False)
