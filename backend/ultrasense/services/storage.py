"""Storage accessor for push registrations and distance readings.

Every function takes the request's AsyncSession and commits its own write.
Errors from SQLAlchemy are left to the caller, which maps them to HTTP 500.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import is_postgres
from ..models import PushRegistration, Reading

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    """Normalize a timestamp to UTC; naive values are taken as UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def upsert_registration(
    session: AsyncSession,
    token: str,
    experience_id: str,
) -> None:
    """Insert or replace the registration for a push token.

    Uses INSERT ... ON CONFLICT so that concurrent registrations of the
    same token still leave exactly one row.
    """
    insert = pg_insert if is_postgres() else sqlite_insert
    now = datetime.now(timezone.utc)
    stmt = insert(PushRegistration).values(
        token=token,
        experience_id=experience_id,
        registered_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[PushRegistration.token],
        set_={
            "experience_id": stmt.excluded.experience_id,
            "registered_at": stmt.excluded.registered_at,
        },
    )
    await session.execute(stmt)
    await session.commit()
    logger.info(f"Push token registered: {token[:16]}... (experience={experience_id})")


async def list_registrations(session: AsyncSession) -> List[PushRegistration]:
    """Get every current push registration."""
    result = await session.execute(
        select(PushRegistration).order_by(PushRegistration.id)
    )
    return list(result.scalars().all())


async def add_reading(
    session: AsyncSession,
    distance: float,
    captured_at: Optional[datetime] = None,
) -> Reading:
    """Append a reading; captured_at defaults to the current time."""
    reading = Reading(
        distance=distance,
        captured_at=_as_utc(captured_at) if captured_at else datetime.now(timezone.utc),
    )
    session.add(reading)
    await session.commit()
    await session.refresh(reading)
    return reading


async def get_latest_reading(session: AsyncSession) -> Optional[Reading]:
    """Get the most recently captured reading, if any."""
    result = await session.execute(
        select(Reading)
        .order_by(Reading.captured_at.desc(), Reading.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
