from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.auth import get_current_user
from tracker.database.config import get_db
from tracker.repositories import LabelRepository
from tracker.schemas import LabelCreate, LabelResponse, LabelUpdate, Page

router = APIRouter(
    prefix="/labels",
    tags=["labels"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=Page[LabelResponse])
async def list_labels(page: int = 1, per_page: int = 20, db: AsyncSession = Depends(get_db)):
    """List labels ordered by name."""
    labels, pagination = await LabelRepository(db).list(page=page, per_page=per_page)
    return {"data": labels, "pagination": pagination}


@router.get("/{label_id}", response_model=LabelResponse)
async def get_label(label_id: str, db: AsyncSession = Depends(get_db)):
    return await LabelRepository(db).get(label_id)


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
async def create_label(payload: LabelCreate, db: AsyncSession = Depends(get_db)):
    """Create a label; the color is stored as uppercase #RRGGBB."""
    return await LabelRepository(db).create(payload)


@router.patch("/{label_id}", response_model=LabelResponse)
async def update_label(label_id: str, payload: LabelUpdate, db: AsyncSession = Depends(get_db)):
    return await LabelRepository(db).update(label_id, payload)


@router.delete("/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_label(label_id: str, db: AsyncSession = Depends(get_db)):
    await LabelRepository(db).delete(label_id)
