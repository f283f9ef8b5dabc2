import logging
from typing import Optional

from sqlalchemy import select

from tracker.database import models
from tracker.errors import NotFoundError
from tracker.repositories.base import CrudRepository, Payload
from tracker.schemas import CommentCreate, CommentUpdate

logger = logging.getLogger(__name__)


class CommentRepository(CrudRepository):
    """Comments hang off an issue by id; the issue is checked, not joined."""

    model = models.Comment
    create_schema = CommentCreate
    update_schema = CommentUpdate
    entity_name = "Comment"
    filter_fields = ("issue_id",)
    required_fields = frozenset({"content", "author"})

    async def _issue_exists(self, issue_id: str) -> bool:
        result = await self.db.execute(select(models.Issue.id).where(models.Issue.id == issue_id))
        return result.first() is not None

    async def create_for_issue(self, issue_id: str, payload: Payload):
        if not await self._issue_exists(issue_id):
            logger.warning("Comment rejected, issue missing", extra={"issue_id": issue_id})
            raise NotFoundError("Cannot add comment: Issue not found")
        return await self.create(payload, issue_id=issue_id)

    async def list_for_issue(
        self,
        issue_id: str,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ):
        if not await self._issue_exists(issue_id):
            raise NotFoundError("Issue not found")
        return await self.list({"issue_id": issue_id}, page=page, per_page=per_page)
