from tracker.database import models
from tracker.repositories.base import CrudRepository
from tracker.schemas import IssueCreate, IssueUpdate


class IssueRepository(CrudRepository):
    model = models.Issue
    create_schema = IssueCreate
    update_schema = IssueUpdate
    entity_name = "Issue"
    filter_fields = ("status", "priority")
    required_fields = frozenset({"title", "status", "priority"})
