"""Pydantic schemas for API request/response models."""
from .token import (
    TokenRegister,
    TokenRegisterResponse,
)
from .reading import (
    ReadingCreate,
    ReadingSubmitResponse,
    LatestReading,
)

__all__ = [
    "TokenRegister",
    "TokenRegisterResponse",
    "ReadingCreate",
    "ReadingSubmitResponse",
    "LatestReading",
]
