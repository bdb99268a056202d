"""
Shared pagination and sorting helpers for the stores.

Pages are 0-based. Sort fields are resolved against a per-store whitelist so
arbitrary client input never reaches ORDER BY.
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Generic, Optional, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sports_events.core.exceptions import ValidationError

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(name: str) -> str:
    """eventDate -> event_date; snake_case input passes through."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = 12
    sort_by: Optional[str] = None
    sort_dir: str = "asc"

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def descending(self) -> bool:
        return self.sort_dir.lower() == "desc"

    def cache_args(self) -> tuple:
        return (self.page, self.size, self.sort_by or "", self.sort_dir.lower())


@dataclass
class PageResult(Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0


def order_by(query: Select, request: PageRequest, sortable: dict[str, Any], default: str) -> Select:
    """Apply the requested sort, falling back to `default`. Unknown fields are rejected."""
    field = to_snake(request.sort_by) if request.sort_by else default
    column = sortable.get(field)
    if column is None:
        raise ValidationError(
            f"Cannot sort by '{request.sort_by}'. Allowed: {', '.join(sorted(sortable))}"
        )
    return query.order_by(column.desc() if request.descending else column.asc())


async def paginate(db: AsyncSession, query: Select, request: PageRequest, scalars: bool = True) -> PageResult:
    """Run `query` for one page and count the full result set."""
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar_one()

    result = await db.execute(query.offset(request.offset).limit(request.size))
    items: Sequence = result.scalars().all() if scalars else result.all()
    return PageResult(items=list(items), total=total, page=request.page, size=request.size)
