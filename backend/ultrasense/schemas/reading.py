"""Distance reading schemas."""
import math
from datetime import datetime
from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, Field, field_validator


class ReadingCreate(BaseModel):
    """Distance reading posted by the sensor."""
    # int stays int so alerts carry the value exactly as submitted
    distance: Union[int, float]
    captured_at: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("capturedAt", "captured_at"),
    )

    @field_validator("distance", mode="before")
    @classmethod
    def check_distance(cls, value):
        # Only real JSON numbers: no booleans, no numeric strings, no NaN/Infinity
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("distance must be a number")
        try:
            as_float = float(value)
        except OverflowError:
            raise ValueError("distance must be finite")
        if not math.isfinite(as_float):
            raise ValueError("distance must be finite")
        return value


class ReadingSubmitResponse(BaseModel):
    """Response after a reading is stored."""
    success: bool
    message: str
    alert_triggered: bool


class LatestReading(BaseModel):
    """Latest stored reading, or nulls when nothing was recorded yet."""
    distance: Optional[float] = None
    captured_at: Optional[str] = None
