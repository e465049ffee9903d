"""
Pytest configuration and fixtures for WebAudit tests.
"""
import os
from typing import AsyncGenerator

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_TOKEN"] = "test-admin-token"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ["CACHE_BACKEND"] = "memory"

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from webaudit.models.base import Base
from webaudit.services.audit_recorder import AuditRecorder
from webaudit.services.cache import MemoryAuditCache
from webaudit.services.fetcher import FetchConfig, PageFetcher
from webaudit.services.rate_limiter import MemoryRateLimiter
from tests.fixtures.fakes import FakeClock, StubFetcher

# Use SQLite for testing (in-memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_maker(test_engine) -> async_sessionmaker:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def recorder(session_maker) -> AuditRecorder:
    return AuditRecorder(session_maker)


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_limiter(clock) -> MemoryRateLimiter:
    return MemoryRateLimiter(max_requests=10, window_ms=60_000, clock=clock)


@pytest.fixture
def audit_cache(clock) -> MemoryAuditCache:
    return MemoryAuditCache(ttl_seconds=600, key_prefix="audit:", clock=clock.seconds)


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def make_fetcher():
    """Build a real PageFetcher over an httpx.MockTransport handler."""

    def _make(handler, timeout_ms: int = 8000) -> PageFetcher:
        return PageFetcher(
            config=FetchConfig(timeout_ms=timeout_ms, user_agent="WebAuditTest/1.0"),
            transport=httpx.MockTransport(handler),
        )

    return _make


# ============================================================================
# FastAPI App Fixtures
# ============================================================================

@pytest.fixture(scope="function")
def app(rate_limiter, audit_cache, stub_fetcher, recorder) -> FastAPI:
    """Application with test services installed on app.state."""
    from webaudit.main import app as main_app

    main_app.state.rate_limiter = rate_limiter
    main_app.state.audit_cache = audit_cache
    main_app.state.fetcher = stub_fetcher
    main_app.state.recorder = recorder

    yield main_app

    for name in ("rate_limiter", "audit_cache", "fetcher", "recorder"):
        if hasattr(main_app.state, name):
            delattr(main_app.state, name)


@pytest_asyncio.fixture(scope="function")
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": "Bearer test-admin-token"}
