"""Database configuration, models, and session management."""

from tracker.database.config import engine, Base, SessionBase, get_db, create_tables
from tracker.database import models

__all__ = ["engine", "Base", "SessionBase", "get_db", "create_tables", "models"]
