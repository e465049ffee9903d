"""
Database connection and session management for WebAudit.
"""
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from webaudit.config import settings
from webaudit.models.base import Base


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    options = {
        "echo": settings.ENVIRONMENT == "development" and settings.LOG_LEVEL == "DEBUG",
        "pool_pre_ping": True,
    }
    if not database_url.startswith("sqlite"):
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(database_url, **options)


engine = build_engine(settings.async_database_url)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Initialize database tables."""
    from webaudit.models.audit import AuditRecord  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
