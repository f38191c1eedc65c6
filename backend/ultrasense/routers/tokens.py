"""Push token registration endpoint."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas.token import TokenRegister, TokenRegisterResponse
from ..services.storage import upsert_registration

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tokens"])


@router.post("/register-token", response_model=TokenRegisterResponse)
async def register_token(
    request: TokenRegister,
    db: AsyncSession = Depends(get_db),
):
    """Register an Expo push token for an experience.

    Re-registering a token replaces its experience id. The token format is
    not checked here; invalid tokens are skipped when alerts go out.
    """
    try:
        await upsert_registration(db, request.token, request.experience_id)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Error registering token: {e}")
        raise HTTPException(status_code=500, detail="Error registering token")

    return TokenRegisterResponse(success=True, message="Token registered")
