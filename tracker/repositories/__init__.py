"""Entity repositories over the issue tracker tables."""

from tracker.repositories.base import CrudRepository, normalize_pagination
from tracker.repositories.comments import CommentRepository
from tracker.repositories.issues import IssueRepository
from tracker.repositories.labels import LabelRepository, normalize_color
from tracker.repositories.milestones import MilestoneRepository

__all__ = [
    "CrudRepository",
    "CommentRepository",
    "IssueRepository",
    "LabelRepository",
    "MilestoneRepository",
    "normalize_color",
    "normalize_pagination",
]
