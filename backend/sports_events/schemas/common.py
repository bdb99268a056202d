"""
Shared response envelopes.
"""

from typing import Any, Callable, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int
    total_pages: int

    @classmethod
    def of(cls, result: Any, convert: Callable[[Any], T]) -> "Page[T]":
        """Build from a store PageResult, converting each item."""
        return cls(
            items=[convert(item) for item in result.items],
            total=result.total,
            page=result.page,
            size=result.size,
            total_pages=result.total_pages,
        )


class ErrorResponse(BaseModel):
    detail: str
    code: str
