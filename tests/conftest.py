"""
BizTime Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: Mock AsyncSession for service unit tests
    ├── make_result: Builds a mock query result returning given rows
    ├── db_engine: In-memory SQLite engine with the schema created
    ├── db_session_factory: Session factory bound to db_engine
    ├── test_app: Fresh app whose real get_db_session opens sessions on db_engine
    └── test_client: HTTPX AsyncClient over test_app
"""

import os

# Override settings for testing BEFORE any biztime imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests
os.environ["ENVIRONMENT"] = "development"

from typing import Any, AsyncGenerator, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

import biztime.database
import biztime.models  # noqa: F401  (registers tables on Base.metadata)
from biztime.database import Base, build_engine


# ══════════════════════════════════════════════════════════════════════════
# Mocked Database (service unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_company(mock_db_session, make_result):
            mock_db_session.execute.return_value = make_result([{...}])
            result = await CompanyService().get_company(mock_db_session, "acme")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def make_result():
    """
    Factory for mock execute() results.

    The returned object answers `.mappings().all()` with the given rows,
    which is all run_query() reads.
    """

    def _make(rows: List[Dict[str, Any]]) -> MagicMock:
        result = MagicMock()
        result.mappings.return_value.all.return_value = rows
        return result

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Real Database (HTTP tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with both tables created.

    StaticPool keeps the single in-memory connection alive for the whole
    test; build_engine() turns on foreign key enforcement.
    """
    engine = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def test_app(db_session_factory, monkeypatch):
    """
    A fresh app from create_app() whose sessions come from the test engine.

    get_db_session() is left in place and looks up async_session_factory at
    call time, so swapping the factory keeps its commit, rollback and close
    behavior under test.
    """
    from biztime.main import create_app

    monkeypatch.setattr(biztime.database, "async_session_factory", db_session_factory)
    return create_app()


@pytest_asyncio.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """
    Provides an async HTTP test client for endpoint testing.

    Requests go through ASGITransport without a server.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/companies")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def company_payload():
    return {"code": "acme", "name": "Acme Corp", "description": "Maker of everything"}
