from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.auth import get_current_user
from tracker.database.config import get_db
from tracker.repositories import MilestoneRepository
from tracker.schemas import (
    MilestoneCreate,
    MilestoneResponse,
    MilestoneStatus,
    MilestoneUpdate,
    Page,
)

router = APIRouter(
    prefix="/milestones",
    tags=["milestones"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=Page[MilestoneResponse])
async def list_milestones(
    status: Optional[MilestoneStatus] = None,
    page: int = 1,
    per_page: int = 20,
    db: AsyncSession = Depends(get_db),
):
    """List milestones, optionally filtered by status."""
    milestones, pagination = await MilestoneRepository(db).list(
        {"status": status}, page=page, per_page=per_page
    )
    return {"data": milestones, "pagination": pagination}


@router.get("/{milestone_id}", response_model=MilestoneResponse)
async def get_milestone(milestone_id: str, db: AsyncSession = Depends(get_db)):
    return await MilestoneRepository(db).get(milestone_id)


@router.post("", response_model=MilestoneResponse, status_code=status.HTTP_201_CREATED)
async def create_milestone(payload: MilestoneCreate, db: AsyncSession = Depends(get_db)):
    return await MilestoneRepository(db).create(payload)


@router.patch("/{milestone_id}", response_model=MilestoneResponse)
async def update_milestone(
    milestone_id: str, payload: MilestoneUpdate, db: AsyncSession = Depends(get_db)
):
    return await MilestoneRepository(db).update(milestone_id, payload)


@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_milestone(milestone_id: str, db: AsyncSession = Depends(get_db)):
    await MilestoneRepository(db).delete(milestone_id)
