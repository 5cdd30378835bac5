"""
Record Store

Persistence for bridgeable resources. Every resource type maps to one table
with a unique ``url`` slug column and a nullable ``library`` column naming
the owning library.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import load_only

from minerva.exceptions import InvalidQueryError, UnknownResourceError
from minerva.models import RESOURCE_TABLES

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Thin query layer over an AsyncSession.

    Lookups return ORM instances; ``fields`` narrows the columns loaded
    (the primary key is always loaded). ``save`` and ``delete`` report
    failure by returning False rather than raising, so controllers can tell
    a rejected write from a successful one.
    """

    def __init__(self, db: AsyncSession, tables: dict[str, type] | None = None) -> None:
        self.db = db
        self.tables = tables if tables is not None else RESOURCE_TABLES

    def table(self, resource_type: str) -> type:
        try:
            return self.tables[resource_type]
        except KeyError:
            raise UnknownResourceError(resource_type) from None

    def _column(self, resource_type: str, name: str):
        orm = self.table(resource_type)
        if name not in orm.__table__.columns:
            raise InvalidQueryError(resource_type, name)
        return getattr(orm, name)

    def _where(self, query, resource_type: str, filters: dict[str, Any] | None):
        for name, value in (filters or {}).items():
            query = query.where(self._column(resource_type, name) == value)
        return query

    async def find_one(
        self,
        resource_type: str,
        filters: dict[str, Any],
        fields: list[str] | None = None,
    ) -> Any | None:
        orm = self.table(resource_type)
        query = self._where(select(orm), resource_type, filters)
        if fields:
            query = query.options(load_only(*(self._column(resource_type, name) for name in fields)))
        result = await self.db.execute(query.limit(1))
        return result.scalars().first()

    async def find_many(
        self,
        resource_type: str,
        filters: dict[str, Any] | None = None,
        *,
        limit: int | None = None,
        offset: int = 0,
        order_by: str = "id",
    ) -> list[Any]:
        orm = self.table(resource_type)
        query = self._where(select(orm), resource_type, filters)
        query = query.order_by(self._column(resource_type, order_by).asc()).offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(self, resource_type: str, filters: dict[str, Any] | None = None) -> int:
        orm = self.table(resource_type)
        query = self._where(select(func.count()).select_from(orm), resource_type, filters)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def save(self, record: Any) -> bool:
        self.db.add(record)
        try:
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error saving {type(record).__name__}: {str(e)}")
            return False
        return True

    async def delete(self, record: Any) -> bool:
        try:
            await self.db.delete(record)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Error deleting {type(record).__name__}: {str(e)}")
            return False
        return True

    async def unique_url(self, resource_type: str, base_slug: str) -> str:
        """First free url among base_slug, base_slug-1, base_slug-2, ..."""
        slug = base_slug
        counter = 1
        while await self.count(resource_type, {"url": slug}):
            slug = f"{base_slug}-{counter}"
            counter += 1
        return slug
