from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.auth import get_current_user
from tracker.database.config import get_db
from tracker.repositories import IssueRepository
from tracker.schemas import (
    IssueCreate,
    IssuePriority,
    IssueResponse,
    IssueStatus,
    IssueUpdate,
    Page,
)

router = APIRouter(
    prefix="/issues",
    tags=["issues"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=Page[IssueResponse])
async def list_issues(
    status: Optional[IssueStatus] = None,
    priority: Optional[IssuePriority] = None,
    page: int = 1,
    per_page: int = 20,
    db: AsyncSession = Depends(get_db),
):
    """List issues, optionally filtered by status and priority."""
    issues, pagination = await IssueRepository(db).list(
        {"status": status, "priority": priority}, page=page, per_page=per_page
    )
    return {"data": issues, "pagination": pagination}


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(issue_id: str, db: AsyncSession = Depends(get_db)):
    """Get issue by ID"""
    return await IssueRepository(db).get(issue_id)


@router.post("", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def create_issue(payload: IssueCreate, db: AsyncSession = Depends(get_db)):
    """Create new issue"""
    return await IssueRepository(db).create(payload)


@router.patch("/{issue_id}", response_model=IssueResponse)
async def update_issue(issue_id: str, payload: IssueUpdate, db: AsyncSession = Depends(get_db)):
    """Update only the fields present in the request body."""
    return await IssueRepository(db).update(issue_id, payload)


@router.delete("/{issue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_issue(issue_id: str, db: AsyncSession = Depends(get_db)):
    """Delete issue by ID. Its comments are left in place."""
    await IssueRepository(db).delete(issue_id)
