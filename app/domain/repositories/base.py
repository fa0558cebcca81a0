"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import Any, Optional, Protocol, TypeVar

from app.domain.schemas.common import Page, PageRequest

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: Any) -> Optional[T]:
        """Get a single entity by primary key."""
        ...

    def list(self, page: PageRequest) -> Page:
        """List entities one page at a time."""
        ...

    def count(self) -> int:
        ...

    def create(self, entity: T) -> T:
        """Persist a new entity; a unique-constraint clash raises a conflict."""
        ...

    def update(self, entity: T) -> T:
        """Flush changes made to a loaded entity."""
        ...

    def delete(self, entity: T) -> None:
        ...

    def exists_by(self, column: Any, value: Any) -> bool:
        ...

    def find_one_by(self, column: Any, value: Any) -> Optional[T]:
        ...

    def search(self, term: str, *columns: Any, page: PageRequest) -> Page:
        """Case-insensitive substring match across ``columns``."""
        ...
