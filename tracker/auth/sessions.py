import asyncio
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from tracker import config
from tracker.database.config import SESSION_DATABASE_URL, SessionBase
from tracker.database.models import StoredSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    id: int
    username: str


@dataclass(frozen=True)
class Session:
    """An issued token and the user it authenticates until ``expires_at``."""

    token: str
    user: SessionUser
    expires_at: float


class SessionStore:
    """Abstract base for session storage backends."""

    async def get(self, token: str) -> Optional[Session]:
        raise NotImplementedError

    async def put(self, session: Session) -> None:
        raise NotImplementedError

    async def delete(self, token: str) -> None:
        """Remove ``token``; unknown tokens are ignored."""
        raise NotImplementedError

    async def purge_expired(self, now: float) -> int:
        """Remove sessions that expired at or before ``now``; return the count."""
        raise NotImplementedError

    async def close(self) -> None:
        pass


class MemorySessionStore(SessionStore):
    """Process-local store; sessions are lost on restart."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    async def get(self, token: str) -> Optional[Session]:
        return self._sessions.get(token)

    async def put(self, session: Session) -> None:
        self._sessions[session.token] = session

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)

    async def purge_expired(self, now: float) -> int:
        expired = [token for token, s in self._sessions.items() if s.expires_at <= now]
        for token in expired:
            del self._sessions[token]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


class SQLSessionStore(SessionStore):
    """Sessions persisted in their own SQLite file."""

    def __init__(self, database_url: str = SESSION_DATABASE_URL):
        self.engine = create_async_engine(database_url, echo=False, future=True)
        self._sessionmaker = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SessionBase.metadata.create_all)

    async def get(self, token: str) -> Optional[Session]:
        async with self._sessionmaker() as db:
            row = await db.get(StoredSession, token)
        if row is None:
            return None
        return Session(
            token=row.token,
            user=SessionUser(id=row.user_id, username=row.username),
            expires_at=row.expires_at,
        )

    async def put(self, session: Session) -> None:
        async with self._sessionmaker() as db:
            await db.merge(
                StoredSession(
                    token=session.token,
                    user_id=session.user.id,
                    username=session.user.username,
                    expires_at=session.expires_at,
                )
            )
            await db.commit()

    async def delete(self, token: str) -> None:
        async with self._sessionmaker() as db:
            await db.execute(delete(StoredSession).where(StoredSession.token == token))
            await db.commit()

    async def purge_expired(self, now: float) -> int:
        async with self._sessionmaker() as db:
            result = await db.execute(
                delete(StoredSession).where(StoredSession.expires_at <= now)
            )
            await db.commit()
        return result.rowcount

    async def count(self) -> int:
        async with self._sessionmaker() as db:
            result = await db.execute(select(StoredSession.token))
            return len(result.all())

    async def close(self) -> None:
        await self.engine.dispose()


class SessionRegistry:
    """Issues, validates and destroys session tokens.

    Expiry is absolute: a session lives ``ttl_seconds`` from login no matter
    how often it is used. A user may hold any number of sessions.
    """

    def __init__(
        self,
        store: SessionStore,
        ttl_seconds: int = config.SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    async def create(self, user) -> str:
        token = secrets.token_urlsafe(32)
        session = Session(
            token=token,
            user=SessionUser(id=user.id, username=user.username),
            expires_at=self.clock() + self.ttl_seconds,
        )
        await self.store.put(session)
        logger.info("Session created", extra={"user_id": user.id})
        return token

    async def validate(self, token: Optional[str]) -> Optional[SessionUser]:
        if not token:
            return None

        session = await self.store.get(token)
        if session is None:
            return None
        if self.clock() >= session.expires_at:
            await self.store.delete(token)
            return None
        return session.user

    async def destroy(self, token: Optional[str]) -> None:
        if token:
            await self.store.delete(token)

    async def purge_expired(self) -> int:
        return await self.store.purge_expired(self.clock())

    async def close(self) -> None:
        await self.store.close()


async def run_cleanup(registry: SessionRegistry, interval: int) -> None:
    """Purge expired sessions every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        try:
            removed = await registry.purge_expired()
        except Exception:
            logger.exception("Session cleanup failed")
            continue
        if removed:
            logger.info("Expired sessions purged", extra={"removed": removed})


async def get_session_store(backend: Optional[str] = None) -> SessionStore:
    """
    Factory function to get the configured session store.

    Reads SESSION_BACKEND when ``backend`` is not given:
    - "memory": in-process dictionary (default)
    - "sqlite": persisted to SESSION_DATABASE_URL

    Raises:
        ValueError: for an unknown backend name
    """
    backend = (backend or config.SESSION_BACKEND).lower().strip()

    if backend == "memory":
        logger.info("Using in-memory session store")
        return MemorySessionStore()
    elif backend == "sqlite":
        store = SQLSessionStore()
        await store.init()
        logger.info("Using SQLite session store")
        return store

    raise ValueError(f"Unknown SESSION_BACKEND: {backend}")
