"""
NoteAssist Backend — Test Configuration (conftest.py)
=======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine / session_factory: in-memory SQLite through aiosqlite
    ├── db_session: a single AsyncSession for service-level tests
    ├── mock_db_session: AsyncMock session for failure-path tests
    ├── fake_provider: scripted LLMProvider (no network)
    ├── test_app: create_app() wired to the fake provider and SQLite
    └── test_client: HTTPX AsyncClient for API endpoint testing
"""

import os

# Override settings for testing BEFORE any noteassist imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["GEMINI_API_KEY"] = ""
os.environ["IDENTITY_HEADER"] = "X-User-Id"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, List, Optional, Tuple  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from noteassist.database import Base, get_db_session  # noqa: E402
from noteassist.models.note import Note  # noqa: E402,F401
from noteassist.services.llm_base import LLMProvider  # noqa: E402

ALICE = "user_alice"
BOB = "user_bob"


def auth(user_id: str) -> dict:
    """Headers the auth gateway would inject for `user_id`."""
    return {"X-User-Id": user_id}


class FakeProvider(LLMProvider):
    """
    Scripted LLMProvider.

    Returns `reply` for every call (or raises `error` when set) and records
    each (prompt, operation) pair in `calls`.
    """

    is_configured = True

    def __init__(self, reply: str = '{"summary": "A short summary."}'):
        self.reply = reply
        self.error: Optional[Exception] = None
        self.healthy = True
        self.calls: List[Tuple[str, str]] = []

    async def generate(self, prompt: str, operation: str = "generate") -> str:
        self.calls.append((prompt, operation))
        if self.error is not None:
            raise self.error
        return self.reply

    async def health_check(self) -> bool:
        return self.healthy


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory SQLite database with the notes table created.

    StaticPool keeps one connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A MagicMock that simulates AsyncSession behavior.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def test_app(fake_provider, session_factory):
    """create_app() with the fake provider and the SQLite session factory."""
    from noteassist.main import create_app

    app = create_app(provider=fake_provider)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    HTTPX AsyncClient routed directly into the app through ASGITransport.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/notes", headers=auth(ALICE))
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
