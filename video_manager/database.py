from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator, Optional
import logging
import os

from video_manager.config import get_settings
from video_manager.errors import ActionError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class DatabaseNotConfigured(ActionError):
    status_code = 500

    def __init__(self):
        super().__init__("DATABASE_URL not configured")


engine = None
async_session_maker = None


def normalize_database_url(database_url: str) -> str:
    """Rewrite sync driver URLs to their async counterparts."""
    # Convert sync sqlite URL to async
    if database_url.startswith("sqlite:///"):
        return database_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

    for prefix in ("postgres://", "postgresql://"):
        if database_url.startswith(prefix):
            database_url = "postgresql+asyncpg://" + database_url[len(prefix):]
            # asyncpg spells libpq's sslmode as ssl
            return database_url.replace("sslmode=", "ssl=")

    return database_url


def is_configured() -> bool:
    return async_session_maker is not None


async def init_db(database_url: Optional[str] = None) -> None:
    """Create the engine and session factory.

    Leaves the module unconfigured when no URL is given and DATABASE_URL is
    unset; requests then fail with DatabaseNotConfigured.
    """
    global engine, async_session_maker

    if database_url is None:
        database_url = get_settings().database_url

    if not database_url:
        logger.warning("DATABASE_URL not configured, database access disabled")
        return

    database_url = normalize_database_url(database_url)

    if database_url.startswith("sqlite+aiosqlite:///"):
        # Ensure database directory exists
        db_path = database_url.replace("sqlite+aiosqlite:///", "")
        db_dir = os.path.dirname(db_path)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)

        engine = create_async_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(database_url, pool_size=3, max_overflow=0)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    # Import models to register them with Base.metadata
    from video_manager import models  # noqa: F401


async def dispose_db() -> None:
    global engine, async_session_maker

    if engine is not None:
        await engine.dispose()
    engine = None
    async_session_maker = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    if async_session_maker is None:
        raise DatabaseNotConfigured()
    async with async_session_maker() as session:
        yield session
