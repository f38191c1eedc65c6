"""API routers."""
from .tokens import router as tokens_router
from .distance import router as distance_router

__all__ = ["tokens_router", "distance_router"]
