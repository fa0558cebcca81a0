"""
SQLAlchemy Implementation of the Table Repository.
"""

from typing import Optional

from app.domain.models.table import Table
from app.domain.repositories.table import TableRepository
from app.domain.schemas.common import Page, PageRequest
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyTableRepository(SQLAlchemyRepository[Table], TableRepository):
    resource_name = "Table"

    def find_by_table_number(self, table_number: str) -> Optional[Table]:
        return self.find_one_by(Table.table_number, table_number)

    def exists_by_table_number(self, table_number: str) -> bool:
        return self.exists_by(Table.table_number, table_number)

    def find_active(self, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Table.is_active.is_(True)), page)

    def find_by_status(self, status: str, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Table.status == status), page)

    def search_by_table_number(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Table.table_number, page=page)
