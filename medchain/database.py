"""PostgreSQL engine, session factory and connectivity checks."""

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from medchain.config import settings

logger = structlog.get_logger(__name__)

ASYNC_DRIVER = "postgresql+asyncpg"


def async_database_url(url: str) -> str:
    """
    Point a PostgreSQL connection string at the asyncpg driver.

    Accepts ``postgres://``, ``postgresql://`` and explicit ``postgresql+driver://``
    forms, so the same ``DATABASE_URL`` serves the app, Alembic and the scripts.

    Raises:
        ValueError: If the URL is not a PostgreSQL URL
    """
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://") :]

    parsed = make_url(url)
    if parsed.get_backend_name() != "postgresql":
        raise ValueError(f"Unsupported database backend: {parsed.get_backend_name()}")

    return parsed.set(drivername=ASYNC_DRIVER).render_as_string(hide_password=False)


engine: AsyncEngine = create_async_engine(
    async_database_url(settings.database_url),
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_recycle=settings.db_pool_recycle_seconds,
    connect_args={"server_settings": {"application_name": settings.app_name}},
)

# Rows are handed out as plain dicts, so nothing relies on expiry after commit
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; uncommitted work is rolled back on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def check_database_connection() -> bool:
    """Run ``SELECT 1``; False (and a warning) when PostgreSQL is unreachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.warning("database_unreachable", error=str(e))
        return False
