"""Reading model - append-only log of ultrasonic distance readings."""
from sqlalchemy import Column, Integer, Float, DateTime

from ..database import Base
from .push_registration import utcnow


class Reading(Base):
    """A single distance reading (cm) reported by the sensor."""
    
    __tablename__ = "distances"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    distance = Column(Float, nullable=False)
    captured_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
