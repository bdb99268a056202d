"""
Category persistence.
"""

from typing import Optional

from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.models.category import Category
from sports_events.models.event import Event, EventStatus


class CategoryStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, category_id: int) -> Optional[Category]:
        return await self.db.get(Category, category_id)

    async def get_by_name(self, name: str) -> Optional[Category]:
        result = await self.db.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def exists_by_name(self, name: str, exclude_id: Optional[int] = None) -> bool:
        conditions = [Category.name == name]
        if exclude_id is not None:
            conditions.append(Category.id != exclude_id)
        return bool((await self.db.execute(select(exists().where(*conditions)))).scalar())

    async def list_all(self) -> list[Category]:
        result = await self.db.execute(select(Category).order_by(Category.name.asc()))
        return list(result.scalars().all())

    async def list_with_active_events(self) -> list[Category]:
        active = exists().where(Event.category_id == Category.id, Event.status == EventStatus.ACTIVE)
        result = await self.db.execute(select(Category).where(active).order_by(Category.name.asc()))
        return list(result.scalars().all())

    async def event_ids(self, category_id: int) -> list[int]:
        result = await self.db.execute(select(Event.id).where(Event.category_id == category_id))
        return list(result.scalars().all())

    async def add(self, category: Category) -> Category:
        self.db.add(category)
        await self.db.flush()
        return category

    async def delete(self, category: Category) -> None:
        await self.db.delete(category)
        await self.db.flush()
