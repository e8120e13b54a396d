from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response schema."""

    items: list[T]
    total: int
    page: int
    page_size: int

    @classmethod
    def build(
        cls,
        rows: Iterable[Any],
        convert: Callable[[Any], T],
        total: int,
        page: int,
        page_size: int,
    ) -> "PaginatedResponse[T]":
        return cls(
            items=[convert(row) for row in rows],
            total=total,
            page=page,
            page_size=page_size,
        )
