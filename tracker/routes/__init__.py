"""API route modules for FastAPI endpoints."""

from tracker.routes.auth import router as auth_router
from tracker.routes.comments import router as comments_router
from tracker.routes.issues import router as issues_router
from tracker.routes.labels import router as labels_router
from tracker.routes.milestones import router as milestones_router

__all__ = [
    "auth_router",
    "comments_router",
    "issues_router",
    "labels_router",
    "milestones_router",
]
