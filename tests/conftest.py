"""Test configuration and fixtures."""

import asyncio
import os
import tempfile

# Configure the app before anything from tracker or main is imported
_TEST_DIR = tempfile.mkdtemp(prefix="tracker-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/database.sqlite"
os.environ["SESSION_DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/sessions.sqlite"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from tracker.database.config import Base, engine  # noqa: E402
from tracker.database import models  # noqa: E402, F401


async def _drop_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def client():
    """Test client with a fresh database for every test."""
    from main import app

    with TestClient(app) as test_client:
        yield test_client
    asyncio.run(_drop_tables())


@pytest.fixture
def sqlite_sessions_app(monkeypatch):
    """The app configured to keep sessions in SESSION_DATABASE_URL."""
    from main import app
    from tracker import config

    monkeypatch.setattr(config, "SESSION_BACKEND", "sqlite")
    yield app
    asyncio.run(_drop_tables())


@pytest.fixture
def auth_client(client):
    """Client logged in as alice (session cookie set)."""
    response = client.post("/register", json={"username": "alice", "password": "pw123"})
    assert response.status_code == 201
    response = client.post("/login", json={"username": "alice", "password": "pw123"})
    assert response.status_code == 200
    return client


@pytest_asyncio.fixture
async def db(tmp_path):
    """Async session on a throwaway SQLite file with all tables created."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/repo.sqlite")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await test_engine.dispose()


@pytest.fixture
def issue_payload():
    return {
        "title": "Bug",
        "description": "Login button does nothing",
        "status": "open",
        "priority": "high",
        "creator": "alice",
    }
