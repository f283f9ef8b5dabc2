from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.auth import get_current_user
from tracker.database.config import get_db
from tracker.repositories import CommentRepository
from tracker.schemas import CommentCreate, CommentResponse, CommentUpdate, Page

router = APIRouter(tags=["comments"], dependencies=[Depends(get_current_user)])


@router.get("/issues/{issue_id}/comments", response_model=Page[CommentResponse])
async def list_comments(
    issue_id: str,
    page: int = 1,
    per_page: int = 20,
    db: AsyncSession = Depends(get_db),
):
    """List comments on an issue, oldest first."""
    comments, pagination = await CommentRepository(db).list_for_issue(
        issue_id, page=page, per_page=per_page
    )
    return {"data": comments, "pagination": pagination}


@router.post(
    "/issues/{issue_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(issue_id: str, payload: CommentCreate, db: AsyncSession = Depends(get_db)):
    """Add a comment to an existing issue."""
    return await CommentRepository(db).create_for_issue(issue_id, payload)


@router.get("/comments/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: str, db: AsyncSession = Depends(get_db)):
    return await CommentRepository(db).get(comment_id)


@router.patch("/comments/{comment_id}", response_model=CommentResponse)
async def update_comment(comment_id: str, payload: CommentUpdate, db: AsyncSession = Depends(get_db)):
    return await CommentRepository(db).update(comment_id, payload)


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: str, db: AsyncSession = Depends(get_db)):
    await CommentRepository(db).delete(comment_id)
