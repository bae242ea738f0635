from sqlalchemy import Column, Integer, String, Text, Boolean

from app.database import Base, UTCDateTime
from app.utils.time_utils import utcnow

class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    # lowercased copies; uniqueness and lookups go through these
    username_key = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    email_key = Column(String, unique=True, index=True, nullable=False)
    bio = Column(Text, nullable=True)
    profile_image = Column(String, nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False, server_default="false")

    created_at = Column(UTCDateTime(), default=utcnow, nullable=False)
