"""Pagination shapes shared by every repository and service."""

from typing import Any, Callable, Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageRequest(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(50, ge=1, le=200)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class Page(BaseModel, Generic[T]):
    items: List[T]
    total: int
    page: int
    page_size: int
    total_pages: int

    model_config = {"arbitrary_types_allowed": True}

    @classmethod
    def build(cls, items: List[Any], total: int, request: PageRequest) -> "Page":
        return cls(
            items=items,
            total=total,
            page=request.page,
            page_size=request.page_size,
            total_pages=(total + request.page_size - 1) // request.page_size,
        )

    def map(self, fn: Callable[[Any], Any]) -> "Page":
        return Page(
            items=[fn(item) for item in self.items],
            total=self.total,
            page=self.page,
            page_size=self.page_size,
            total_pages=self.total_pages,
        )
