"""Distance reading endpoints - sensor submissions and latest-reading polling."""
import logging
from datetime import timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..database import get_db
from ..schemas.reading import ReadingCreate, ReadingSubmitResponse, LatestReading
from ..services.alerter import AlerterService, alerter_service
from ..services.storage import add_reading, get_latest_reading

logger = logging.getLogger(__name__)

router = APIRouter(tags=["distance"])


def get_alerter() -> AlerterService:
    """Dependency returning the alerter used for threshold notifications."""
    return alerter_service


@router.post("/distance", response_model=ReadingSubmitResponse)
@router.post("/send-distance", response_model=ReadingSubmitResponse, include_in_schema=False)
async def submit_distance(
    request: ReadingCreate,
    db: AsyncSession = Depends(get_db),
    alerter: AlerterService = Depends(get_alerter),
):
    """Store a distance reading and alert devices if it crosses the threshold.

    The reading is persisted first. Notification problems are logged and do
    not change the response once the reading is stored.
    """
    try:
        await add_reading(db, request.distance, request.captured_at)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error storing distance: {e}")
        raise HTTPException(status_code=500, detail="Error storing distance")

    alert_triggered = request.distance >= settings.alert_threshold
    if alert_triggered:
        try:
            await alerter.notify_threshold_crossed(db, request.distance)
        except Exception as e:
            logger.error(f"Error sending distance alert: {e}")

    return ReadingSubmitResponse(
        success=True,
        message="Distance received",
        alert_triggered=alert_triggered,
    )


@router.get("/latest-distance", response_model=LatestReading)
async def latest_distance(db: AsyncSession = Depends(get_db)):
    """Get the most recently captured reading."""
    try:
        reading = await get_latest_reading(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching distance: {e}")
        raise HTTPException(status_code=500, detail="Error fetching distance")

    if not reading:
        return LatestReading()

    captured_at = reading.captured_at
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if captured_at.tzinfo is None:
        captured_at = captured_at.replace(tzinfo=timezone.utc)

    return LatestReading(
        distance=reading.distance,
        captured_at=captured_at.isoformat(),
    )
