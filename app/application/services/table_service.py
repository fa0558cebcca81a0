"""Dining table service."""

import structlog

from app.core.exceptions import (
    BusinessRuleViolationException,
    DuplicateResourceException,
    EntityNotFoundException,
    InvalidRequestException,
)
from app.domain.mapping import table_mapper
from app.domain.models.table import TABLE_STATUSES, Table
from app.domain.repositories.order import OrderRepository
from app.domain.repositories.table import TableRepository
from app.domain.schemas.common import Page, PageRequest
from app.domain.schemas.table import TableCreate, TableResponse, TableUpdate

logger = structlog.get_logger(__name__)


class TableService:
    def __init__(self, tables: TableRepository, orders: OrderRepository):
        self.tables = tables
        self.orders = orders

    def create(self, request: TableCreate) -> TableResponse:
        if self.tables.exists_by_table_number(request.table_number):
            raise DuplicateResourceException("Table", "table_number", request.table_number)

        table = self.tables.create(table_mapper.to_entity(request))
        logger.info("Table created", table_id=table.id, table_number=table.table_number)
        return table_mapper.to_response(table)

    def get(self, table_id: int) -> TableResponse:
        return table_mapper.to_response(self.get_entity(table_id))

    def get_by_number(self, table_number: str) -> TableResponse:
        table = self.tables.find_by_table_number(table_number)
        if table is None:
            raise EntityNotFoundException("Table", "table_number", table_number)
        return table_mapper.to_response(table)

    def get_entity(self, table_id: int) -> Table:
        table = self.tables.get_by_id(table_id)
        if table is None:
            raise EntityNotFoundException("Table", "id", table_id)
        return table

    def update(self, table_id: int, request: TableUpdate) -> TableResponse:
        table = self.get_entity(table_id)
        if (
            request.table_number is not None
            and request.table_number != table.table_number
            and self.tables.exists_by_table_number(request.table_number)
        ):
            raise DuplicateResourceException("Table", "table_number", request.table_number)

        table = self.tables.update(table_mapper.apply_update(table, request))
        logger.info("Table updated", table_id=table.id)
        return table_mapper.to_response(table)

    def change_status(self, table_id: int, status: str) -> TableResponse:
        if status not in TABLE_STATUSES:
            raise InvalidRequestException(f"Unknown table status '{status}'", details={"allowed": TABLE_STATUSES})
        table = self.get_entity(table_id)
        table.status = status
        table = self.tables.update(table)
        logger.info("Table status changed", table_id=table.id, status=status)
        return table_mapper.to_response(table)

    def set_active(self, table_id: int, active: bool) -> TableResponse:
        table = self.get_entity(table_id)
        table.is_active = active
        table = self.tables.update(table)
        logger.info("Table activation changed", table_id=table.id, is_active=active)
        return table_mapper.to_response(table)

    def delete(self, table_id: int) -> None:
        table = self.get_entity(table_id)
        orders = self.orders.count_by_table(table.id)
        if orders:
            raise BusinessRuleViolationException(
                f"Table '{table.table_number}' is referenced by {orders} order(s)",
                details={"table_id": table.id, "orders": orders},
            )
        self.tables.delete(table)
        logger.info("Table deleted", table_id=table_id)

    def list(self, page: PageRequest) -> Page:
        return self.tables.list(page).map(table_mapper.to_response)

    def list_active(self, page: PageRequest) -> Page:
        return self.tables.find_active(page).map(table_mapper.to_response)

    def list_by_status(self, status: str, page: PageRequest) -> Page:
        return self.tables.find_by_status(status, page).map(table_mapper.to_response)

    def search_by_number(self, term: str, page: PageRequest) -> Page:
        return self.tables.search_by_table_number(term, page).map(table_mapper.to_response)
