"""Generic CRUD repository shared by the entity tables.

Each concrete repository binds an ORM model to its create/update schemas and
declares which columns may be filtered on. All writes for one call happen in
a single transaction: the row is inserted or changed, read back, then
committed.
"""

import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tracker.errors import (
    InvalidInputError,
    NoUpdateFieldsError,
    NotFoundError,
    summarize_validation_errors,
)
from tracker.schemas import Pagination

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100

# Largest OFFSET SQLite can bind; pages past it are empty
MAX_OFFSET = 2**63 - 1

Payload = Union[BaseModel, Mapping[str, Any]]


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def normalize_pagination(page: Optional[int], per_page: Optional[int]) -> tuple[int, int]:
    """Clamp page to >= 1 and per_page to [1, MAX_PER_PAGE]."""
    page = DEFAULT_PAGE if page is None or page < 1 else page
    if per_page is None:
        per_page = DEFAULT_PER_PAGE
    per_page = max(1, min(per_page, MAX_PER_PAGE))
    return page, per_page


def validate_payload(schema: type[BaseModel], payload: Payload, message: str) -> BaseModel:
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(message, details=summarize_validation_errors(exc.errors()))


class CrudRepository:
    model: Any = None
    create_schema: type[BaseModel] = BaseModel
    update_schema: type[BaseModel] = BaseModel
    entity_name = "Resource"
    filter_fields: tuple[str, ...] = ()
    required_fields: frozenset[str] = frozenset()
    timestamped = True
    order_by: tuple[str, ...] = ("created_at", "id")

    def __init__(self, db: AsyncSession):
        self.db = db

    def prepare(self, values: dict) -> dict:
        """Hook for normalizing column values before they are written."""
        return values

    @property
    def not_found_message(self) -> str:
        return f"{self.entity_name} not found"

    async def _get_row(self, entity_id: str):
        result = await self.db.execute(select(self.model).where(self.model.id == entity_id))
        return result.scalars().first()

    async def _save(self, row):
        try:
            await self.db.flush()
            await self.db.refresh(row)
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return row

    async def create(self, payload: Payload, **columns):
        payload = validate_payload(
            self.create_schema,
            payload,
            f"Missing or invalid fields for creating a {self.entity_name.lower()}.",
        )
        values = self.prepare(payload.model_dump(mode="json"))
        values.update(columns)

        row = self.model(id=str(uuid.uuid4()), **values)
        if self.timestamped:
            row.created_at = row.updated_at = now_iso()

        self.db.add(row)
        await self._save(row)
        logger.info(
            f"{self.entity_name} created",
            extra={"entity": self.model.__tablename__, "entity_id": row.id},
        )
        return row

    async def get(self, entity_id: str):
        row = await self._get_row(entity_id)
        if row is None:
            raise NotFoundError(self.not_found_message)
        return row

    async def list(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ):
        """Return one page of rows matching the equality filters.

        ``total`` counts every matching row, not just the rows on this page.
        """
        page, per_page = normalize_pagination(page, per_page)

        conditions = []
        for field, value in (filters or {}).items():
            if field not in self.filter_fields:
                raise InvalidInputError(f"Cannot filter {self.entity_name.lower()}s by '{field}'.")
            if value is None:
                continue
            if isinstance(value, Enum):
                value = value.value
            conditions.append(getattr(self.model, field) == value)

        offset = (page - 1) * per_page
        rows = []
        if offset <= MAX_OFFSET:
            stmt = (
                select(self.model)
                .where(*conditions)
                .order_by(*(getattr(self.model, column) for column in self.order_by))
                .limit(per_page)
                .offset(offset)
            )
            rows = (await self.db.execute(stmt)).scalars().all()
        total = await self.db.scalar(
            select(func.count()).select_from(self.model).where(*conditions)
        )

        return list(rows), Pagination(total=total or 0, page=page, per_page=per_page)

    async def update(self, entity_id: str, payload: Payload):
        payload = validate_payload(
            self.update_schema,
            payload,
            f"Invalid fields for updating a {self.entity_name.lower()}.",
        )
        changes = payload.model_dump(exclude_unset=True, mode="json")
        if not changes:
            raise NoUpdateFieldsError()

        nulled = sorted(field for field, value in changes.items()
                        if value is None and field in self.required_fields)
        if nulled:
            raise InvalidInputError(f"Fields cannot be null: {', '.join(nulled)}.")

        changes = self.prepare(changes)

        row = await self._get_row(entity_id)
        if row is None:
            raise NotFoundError(self.not_found_message)

        for field, value in changes.items():
            setattr(row, field, value)
        if self.timestamped:
            row.updated_at = now_iso()

        await self._save(row)
        logger.info(
            f"{self.entity_name} updated",
            extra={"entity_id": entity_id, "fields": sorted(changes)},
        )
        return row

    async def delete(self, entity_id: str) -> None:
        try:
            result = await self.db.execute(delete(self.model).where(self.model.id == entity_id))
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        if result.rowcount == 0:
            raise NotFoundError(self.not_found_message)
        logger.info(f"{self.entity_name} deleted", extra={"entity_id": entity_id})
