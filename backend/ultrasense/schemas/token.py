"""Push token registration schemas."""
from pydantic import AliasChoices, BaseModel, Field


class TokenRegister(BaseModel):
    """Request to register an Expo push token for an experience."""
    token: str = Field(..., min_length=1)
    # Older app builds send experience_id or groupKey
    experience_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("experienceId", "experience_id", "groupKey"),
    )


class TokenRegisterResponse(BaseModel):
    """Response after registering a token."""
    success: bool
    message: str
