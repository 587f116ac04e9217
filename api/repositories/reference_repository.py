"""Repositories for pre-created rows that posts reference by id."""

from collections.abc import Sequence
from typing import ClassVar, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Category, Image, Location
from repositories.utils import log_slow_query, order_by_requested_ids

T = TypeVar("T", Category, Location, Image)


class _ReferenceRepository(Generic[T]):
    """Id lookups shared by the category, location and image stores."""

    model: ClassVar[type]

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_by_id(self, entity_id: int) -> T | None:
        return await self.db.get(self.model, entity_id)

    @log_slow_query("references.get_many_by_ids")
    async def get_many_by_ids(self, ids: Sequence[int]) -> list[T]:
        """Get every row whose id is in `ids` in a single query.

        Missing ids are silently skipped. Rows come back in the order their
        id first appears in `ids`.
        """
        if not ids:
            return []
        result = await self.db.execute(
            select(self.model).where(self.model.id.in_(set(ids)))
        )
        return order_by_requested_ids(result.scalars().all(), ids)

    async def add(self, entity: T) -> T:
        """Stage a row and flush. Does NOT commit."""
        self.db.add(entity)
        await self.db.flush()
        return entity


class CategoryRepository(_ReferenceRepository[Category]):
    """Repository for Category lookups."""

    model = Category


class LocationRepository(_ReferenceRepository[Location]):
    """Repository for Location lookups."""

    model = Location


class ImageRepository(_ReferenceRepository[Image]):
    """Repository for Image lookups."""

    model = Image
