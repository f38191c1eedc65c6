"""Engine, session factory and table bootstrap for readings and push tokens.

DATABASE_URL selects PostgreSQL (postgresql+asyncpg://...) or another SQLite
file; without it the SQLite file lives under DATA_PATH.
"""
import logging
import os
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base

from .config import get_database_url, is_postgresql

logger = logging.getLogger(__name__)

_is_postgres = is_postgresql()

# One engine per process; pool sizing stays at the driver defaults
engine = create_async_engine(
    get_database_url(),
    echo=False,
    pool_pre_ping=_is_postgres,
)
logger.info(f"Using {'PostgreSQL' if _is_postgres else 'SQLite'} database")

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


def is_postgres() -> bool:
    """Whether the configured engine talks to PostgreSQL."""
    return _is_postgres


def sqlite_directory(url) -> str | None:
    """Directory holding the SQLite file a database URL names, if any."""
    url = make_url(url)
    if not url.drivername.startswith("sqlite"):
        return None
    if not url.database or url.database == ":memory:":
        return None
    return os.path.dirname(os.path.abspath(url.database))


async def get_db() -> AsyncSession:
    """Dependency to get database session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create the SQLite directory if needed, then the tables."""
    # Registers PushRegistration and Reading on Base.metadata
    from . import models  # noqa: F401

    directory = sqlite_directory(engine.url)
    if directory:
        os.makedirs(directory, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections."""
    await engine.dispose()
