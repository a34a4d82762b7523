"""Database configuration and connection management."""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings
from app.core.exceptions import ProcedureError

# Convert sync PostgreSQL URL to async
DATABASE_URL = settings.database_url.replace("postgresql://", "postgresql+asyncpg://")

# Create async engine with connection pooling
engine: AsyncEngine = create_async_engine(
    DATABASE_URL,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_size=10,
    max_overflow=20,
    pool_recycle=3600,
    connect_args={
        "server_settings": {
            "application_name": settings.app_name,
        },
    },
)

# Async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def to_procedure_error(exc: DBAPIError) -> ProcedureError:
    """
    Build a structured error from a driver exception.

    The asyncpg adapter keeps the original asyncpg exception as the cause of
    ``exc.orig``; it exposes ``sqlstate`` and the raw server ``message``.

    Args:
        exc: Exception raised by SQLAlchemy

    Returns:
        ProcedureError with a numeric code when the SQLSTATE is numeric
    """
    orig = exc.orig
    cause = getattr(orig, "__cause__", None)

    sqlstate = getattr(cause, "sqlstate", None) or getattr(orig, "pgcode", None)
    message = getattr(cause, "message", None) or str(orig if orig is not None else exc)

    code = int(sqlstate) if sqlstate is not None and str(sqlstate).isdigit() else None
    return ProcedureError(code=code, message=message)


async def check_database_connection() -> bool:
    """Check if database connection is healthy."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
