"""
Table Repository Interface.
"""

from typing import Optional

from app.domain.models.table import Table
from app.domain.repositories.base import BaseRepository
from app.domain.schemas.common import Page, PageRequest


class TableRepository(BaseRepository[Table]):
    def find_by_table_number(self, table_number: str) -> Optional[Table]:
        ...

    def exists_by_table_number(self, table_number: str) -> bool:
        ...

    def find_active(self, page: PageRequest) -> Page:
        ...

    def find_by_status(self, status: str, page: PageRequest) -> Page:
        ...

    def search_by_table_number(self, term: str, page: PageRequest) -> Page:
        ...
