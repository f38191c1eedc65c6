"""Main FastAPI application for the UltraSense distance alert backend."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db, close_db
from .routers import tokens_router, distance_router
from .services.push_sender import push_sender_service

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting UltraSense backend")

    # The server cannot do anything useful without storage
    try:
        await init_db()
    except Exception as e:
        logger.critical(f"Database initialization failed: {e}")
        raise
    logger.info("Database initialized")

    yield

    await push_sender_service.close()
    await close_db()
    logger.info("Shutdown complete")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 Bad Request."""
    # The raw input is left out; it may hold values JSON cannot encode (NaN)
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
        for error in exc.errors()
    ]
    logger.info(f"Rejected {request.method} {request.url.path}: {errors}")
    return JSONResponse(status_code=400, content={"detail": errors})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="UltraSense",
        description="Ultrasonic distance ingestion and push alerting",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Mobile clients and the sensor call from anywhere
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(tokens_router)
    app.include_router(distance_router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
