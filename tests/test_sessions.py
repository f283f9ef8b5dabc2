"""Tests for the session registry and its stores."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from tracker.auth.sessions import (
    MemorySessionStore,
    Session,
    SessionRegistry,
    SessionUser,
    SQLSessionStore,
    get_session_store,
    run_cleanup,
)


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry(clock):
    return SessionRegistry(MemorySessionStore(), ttl_seconds=3600, clock=clock)


@pytest.fixture
def alice():
    return SessionUser(id=1, username="alice")


@pytest.mark.asyncio
async def test_create_then_validate(registry, alice):
    token = await registry.create(alice)

    assert token
    assert await registry.validate(token) == alice


@pytest.mark.asyncio
async def test_tokens_are_unique_per_login(registry, alice):
    tokens = {await registry.create(alice) for _ in range(5)}

    assert len(tokens) == 5
    for token in tokens:
        assert await registry.validate(token) == alice


@pytest.mark.asyncio
async def test_expiry_is_absolute(registry, clock, alice):
    token = await registry.create(alice)

    clock.now += 3599
    assert await registry.validate(token) == alice

    # Using the session did not extend it
    clock.now += 1
    assert await registry.validate(token) is None


@pytest.mark.asyncio
async def test_expired_session_is_removed_on_validate(registry, clock, alice):
    token = await registry.create(alice)
    clock.now += 7200

    assert await registry.validate(token) is None
    assert len(registry.store) == 0


@pytest.mark.asyncio
async def test_validate_missing_token(registry):
    assert await registry.validate(None) is None
    assert await registry.validate("") is None
    assert await registry.validate("unknown") is None


@pytest.mark.asyncio
async def test_destroy_is_idempotent(registry, alice):
    token = await registry.create(alice)

    await registry.destroy(token)
    await registry.destroy(token)
    await registry.destroy("never-issued")

    assert await registry.validate(token) is None


@pytest.mark.asyncio
async def test_purge_expired(registry, clock, alice):
    old = await registry.create(alice)
    clock.now += 1800
    fresh = await registry.create(alice)
    clock.now += 1800

    assert await registry.purge_expired() == 1
    assert await registry.validate(old) is None
    assert await registry.validate(fresh) == alice


@pytest.mark.asyncio
async def test_sql_store_persists_across_instances(tmp_path, alice):
    url = f"sqlite+aiosqlite:///{tmp_path}/sessions.sqlite"
    store = SQLSessionStore(url)
    await store.init()
    await store.put(Session(token="abc", user=alice, expires_at=5_000.0))
    await store.close()

    reopened = SQLSessionStore(url)
    await reopened.init()
    try:
        session = await reopened.get("abc")
        assert session == Session(token="abc", user=alice, expires_at=5_000.0)

        await reopened.delete("abc")
        await reopened.delete("abc")
        assert await reopened.get("abc") is None
    finally:
        await reopened.close()


@pytest.mark.asyncio
async def test_sql_store_purge_expired(tmp_path, alice):
    store = SQLSessionStore(f"sqlite+aiosqlite:///{tmp_path}/sessions.sqlite")
    await store.init()
    try:
        await store.put(Session(token="old", user=alice, expires_at=100.0))
        await store.put(Session(token="new", user=alice, expires_at=900.0))

        assert await store.purge_expired(500.0) == 1
        assert await store.count() == 1
        assert await store.get("new") is not None
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_registry_over_sql_store(tmp_path, clock, alice):
    store = SQLSessionStore(f"sqlite+aiosqlite:///{tmp_path}/sessions.sqlite")
    await store.init()
    registry = SessionRegistry(store, ttl_seconds=60, clock=clock)
    try:
        token = await registry.create(alice)
        assert await registry.validate(token) == alice

        clock.now += 60
        assert await registry.validate(token) is None
    finally:
        await registry.close()


@pytest.mark.asyncio
async def test_session_store_factory():
    store = await get_session_store("memory")
    assert isinstance(store, MemorySessionStore)

    with pytest.raises(ValueError):
        await get_session_store("redis")


async def _wait_until(condition, timeout: float = 2.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition() and loop.time() < deadline:
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_cleanup_loop_purges_expired_sessions(clock, alice):
    store = MemorySessionStore()
    registry = SessionRegistry(store, ttl_seconds=60, clock=clock)
    await registry.create(alice)
    clock.now += 60

    task = asyncio.create_task(run_cleanup(registry, 0.01))
    await _wait_until(lambda: len(store) == 0)

    assert len(store) == 0
    assert not task.done()

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


class FlakyStore(MemorySessionStore):
    """Fails the first purge, then behaves normally."""

    def __init__(self):
        super().__init__()
        self.purge_calls = 0

    async def purge_expired(self, now: float) -> int:
        self.purge_calls += 1
        if self.purge_calls == 1:
            raise RuntimeError("disk unavailable")
        return await super().purge_expired(now)


@pytest.mark.asyncio
async def test_cleanup_loop_survives_a_failed_purge(clock, alice):
    store = FlakyStore()
    registry = SessionRegistry(store, ttl_seconds=60, clock=clock)
    await registry.create(alice)
    clock.now += 60

    task = asyncio.create_task(run_cleanup(registry, 0.01))
    await _wait_until(lambda: len(store) == 0)

    assert store.purge_calls >= 2
    assert len(store) == 0

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


def test_app_with_sqlite_session_backend(sqlite_sessions_app):
    credentials = {"username": "alice", "password": "pw123"}

    with TestClient(sqlite_sessions_app) as client:
        assert isinstance(sqlite_sessions_app.state.session_registry.store, SQLSessionStore)

        assert client.post("/register", json=credentials).status_code == 201
        token = client.post("/login", json=credentials).json()["session_token"]
        assert client.get("/profile").status_code == 200

    # The session outlives the process that created it
    with TestClient(sqlite_sessions_app) as client:
        response = client.get("/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["user"]["username"] == "alice"
