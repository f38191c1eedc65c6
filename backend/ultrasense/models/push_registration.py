"""PushRegistration model - Expo push tokens grouped by experience id."""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime

from ..database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PushRegistration(Base):
    """A mobile client's push token and the experience it belongs to."""
    
    __tablename__ = "push_registrations"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String, unique=True, nullable=False, index=True)
    experience_id = Column(String, nullable=True)  # NULL/empty = "unknown" group
    registered_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
