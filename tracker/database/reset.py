"""Back up and recreate the SQLite databases.

Usage: python -m tracker.database.reset
"""

import asyncio
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine

from tracker.database.config import DATABASE_URL, SESSION_DATABASE_URL, Base, SessionBase

logger = logging.getLogger(__name__)


def sqlite_path(database_url: str) -> Optional[Path]:
    """Return the file behind a SQLite URL, or None for memory/other databases."""
    url = make_url(database_url)
    if not url.drivername.startswith("sqlite") or url.database in (None, "", ":memory:"):
        return None
    return Path(url.database)


def backup_file(path: Path, backup_dir: Path, timestamp: str) -> Optional[Path]:
    if not path.exists():
        return None
    backup_dir.mkdir(parents=True, exist_ok=True)
    target = backup_dir / f"{path.name}.{timestamp}.bak"
    shutil.copy2(path, target)
    logger.info(f"Backed up {path} to {target}")
    return target


async def _create_schema(database_url: str, metadata) -> None:
    engine = create_async_engine(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    finally:
        await engine.dispose()


async def reset_databases(
    database_url: str = DATABASE_URL,
    session_database_url: str = SESSION_DATABASE_URL,
    backup_dir: Path = Path("backups"),
) -> list[Path]:
    """Back up, delete and recreate both databases; return the backup paths."""
    from tracker.database import models  # noqa: F401

    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S-%f")
    backups = []

    for url in (database_url, session_database_url):
        path = sqlite_path(url)
        if path is None:
            continue
        backup = backup_file(path, backup_dir, timestamp)
        if backup is not None:
            backups.append(backup)
        if path.exists():
            path.unlink()
            logger.info(f"Removed {path}")

    await _create_schema(database_url, Base.metadata)
    await _create_schema(session_database_url, SessionBase.metadata)
    logger.info("Database tables successfully created.")
    return backups


if __name__ == "__main__":
    from dotenv import load_dotenv

    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(name)s | %(message)s")
    asyncio.run(
        reset_databases(
            os.getenv("DATABASE_URL", DATABASE_URL),
            os.getenv("SESSION_DATABASE_URL", SESSION_DATABASE_URL),
        )
    )
