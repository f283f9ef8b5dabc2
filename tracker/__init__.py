"""FastAPI Issue Tracker backend.

A FastAPI application for managing issues with:
- RESTful CRUD operations for issues, comments, labels and milestones
- bcrypt-hashed user credentials
- Session tokens over a pluggable session store
- SQLAlchemy ORM with async support on SQLite
"""
