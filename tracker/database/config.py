import os
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

# Get database URLs from environment or use defaults
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite+aiosqlite:///./database.sqlite"
)
SESSION_DATABASE_URL = os.getenv(
    "SESSION_DATABASE_URL",
    "sqlite+aiosqlite:///./sessions.sqlite"
)

# Create async engine for FastAPI
engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    future=True
)

# Create async session factory for FastAPI
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)


# Base class for business models
class Base(DeclarativeBase):
    pass


# Base class for the persisted session table, which lives in its own file
class SessionBase(DeclarativeBase):
    pass


# Dependency to get DB session
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


async def create_tables() -> None:
    """Create all business tables on the configured engine."""
    from tracker.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
