"""Password/credential store backed by the ``users`` table."""

import asyncio
import functools
import logging

import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker import config
from tracker.database import models
from tracker.errors import (
    HashError,
    InvalidCredentialsError,
    InvalidInputError,
    UserExistsError,
)
from tracker.repositories.base import now_iso

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes and bcrypt>=5 rejects anything longer
MAX_PASSWORD_BYTES = 72

_DUMMY_PASSWORD = "not-a-real-password"


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


@functools.lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash at the configured cost, checked when a login has no stored hash to compare."""
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_DUMMY_PASSWORD.encode("utf-8"), salt).decode("utf-8")


async def hash_password(password: str, rounds: int = None) -> str:
    """Hash ``password`` with bcrypt in a worker thread.

    Raises:
        HashError: if bcrypt rejects the input; the library message is
            logged, never returned
    """
    rounds = rounds or config.BCRYPT_ROUNDS
    try:
        hashed = await asyncio.to_thread(
            bcrypt.hashpw, password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)
        )
    except (ValueError, TypeError) as exc:
        logger.error(f"Password hashing failed: {exc}")
        raise HashError()
    return hashed.decode("utf-8")


async def check_password(password: str, hashed: str) -> bool:
    try:
        return await asyncio.to_thread(
            bcrypt.checkpw, password.encode("utf-8"), hashed.encode("utf-8")
        )
    except (ValueError, TypeError) as exc:
        logger.error(f"Password verification failed: {exc}")
        raise HashError()


async def register(db: AsyncSession, username: str, password: str) -> int:
    """Create a user and return its id."""
    if not username or not password:
        raise InvalidInputError("Username and password are required.")
    if password_too_long(password):
        raise InvalidInputError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")

    hashed = await hash_password(password)
    now = now_iso()
    user = models.User(username=username, password=hashed, created_at=now, updated_at=now)
    db.add(user)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info("Registration rejected, username taken", extra={"username": username})
        raise UserExistsError()

    logger.info("User registered", extra={"user_id": user.id})
    return user.id


async def verify(db: AsyncSession, username: str, password: str) -> models.User:
    """Return the user for valid credentials.

    Every failure raises the same error after one bcrypt check, so neither
    the response nor its timing shows whether the username exists.
    """
    if not username or not password:
        raise InvalidInputError("Username and password are required.")

    result = await db.execute(select(models.User).where(models.User.username == username))
    user = result.scalars().first()

    if user is None or password_too_long(password):
        dummy = await asyncio.to_thread(_dummy_hash)
        await check_password(_DUMMY_PASSWORD, dummy)
        raise InvalidCredentialsError()

    if not await check_password(password, user.password):
        raise InvalidCredentialsError()
    return user
