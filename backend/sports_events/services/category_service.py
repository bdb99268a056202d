"""
Category service: cached lookups and invalidating writes.
"""

from typing import Optional

from pydantic import TypeAdapter
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.exceptions import ConflictError, ErrorCode, NotFoundError
from sports_events.core.logging import get_logger
from sports_events.core.metrics import record_db_operation
from sports_events.models.category import Category
from sports_events.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from sports_events.services.cache_service import CachePartition, ReadThroughCache
from sports_events.stores.category_store import CategoryStore
from sports_events.stores.event_store import EventStore

logger = get_logger(__name__)

_one = TypeAdapter(Optional[CategoryResponse])
_many = TypeAdapter(list[CategoryResponse])

PARTITION = CachePartition.CATEGORIES


class CategoryService:
    def __init__(self, db: AsyncSession, cache: ReadThroughCache) -> None:
        self.db = db
        self.cache = cache
        self.categories = CategoryStore(db)
        self.events = EventStore(db)

    async def list_categories(self) -> list[CategoryResponse]:
        async def load():
            return [CategoryResponse.model_validate(c) for c in await self.categories.list_all()]

        return await self.cache.get_or_load(PARTITION, "all-categories", (), _many, load)

    async def list_with_active_events(self) -> list[CategoryResponse]:
        async def load():
            return [CategoryResponse.model_validate(c) for c in await self.categories.list_with_active_events()]

        return await self.cache.get_or_load(PARTITION, "categories-with-events", (), _many, load)

    async def get_category(self, category_id: int) -> CategoryResponse:
        async def load():
            category = await self.categories.get(category_id)
            return CategoryResponse.model_validate(category) if category else None

        found = await self.cache.get_or_load(PARTITION, "category-by-id", (category_id,), _one, load)
        if found is None:
            raise NotFoundError("Category", category_id)
        return found

    async def get_by_name(self, name: str) -> CategoryResponse:
        async def load():
            category = await self.categories.get_by_name(name)
            return CategoryResponse.model_validate(category) if category else None

        found = await self.cache.get_or_load(PARTITION, "category-by-name", (name,), _one, load)
        if found is None:
            raise NotFoundError("Category", name)
        return found

    async def create_category(self, data: CategoryCreate) -> Category:
        if await self.categories.exists_by_name(data.name):
            raise ConflictError(f"Category '{data.name}' already exists", ErrorCode.DUPLICATE_CATEGORY)

        try:
            category = await self.categories.add(Category(**data.model_dump()))
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent create of the same name
            await self.db.rollback()
            raise ConflictError(f"Category '{data.name}' already exists", ErrorCode.DUPLICATE_CATEGORY)
        record_db_operation("insert")
        logger.info("category_created", category_id=category.id, name=category.name)

        await self.cache.invalidate(PARTITION)
        return category

    async def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        category = await self.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") is None:
            changes.pop("name", None)
        elif await self.categories.exists_by_name(changes["name"], exclude_id=category_id):
            raise ConflictError(f"Category '{changes['name']}' already exists", ErrorCode.DUPLICATE_CATEGORY)

        for field, value in changes.items():
            setattr(category, field, value)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(f"Category '{changes.get('name')}' already exists", ErrorCode.DUPLICATE_CATEGORY)
        record_db_operation("update")
        logger.info("category_updated", category_id=category_id, fields=sorted(changes))

        await self.cache.invalidate(PARTITION)
        return category

    async def delete_category(self, category_id: int, cascade: bool = False) -> None:
        category = await self.categories.get(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        event_ids = await self.categories.event_ids(category_id)
        if event_ids and not cascade:
            raise ConflictError(
                f"Category {category_id} still has {len(event_ids)} event(s)", ErrorCode.HAS_DEPENDENTS
            )

        bookings_removed = await self.events.delete_many(event_ids)
        await self.categories.delete(category)
        await self.db.commit()
        record_db_operation("delete")
        logger.info(
            "category_deleted",
            category_id=category_id,
            events_removed=len(event_ids),
            bookings_removed=bookings_removed,
        )

        await self.cache.invalidate(CachePartition.CATEGORIES, CachePartition.VENUES)
