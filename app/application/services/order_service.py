"""
Order service: order creation, status lifecycle and reporting.

A status change stamps the matching lifecycle timestamp the first time the
order reaches that status; an existing stamp is never overwritten. Paid and
canceled orders are final.
"""

from datetime import datetime
from typing import Optional

import structlog

from app.core import clock
from app.core.exceptions import (
    BusinessRuleViolationException,
    EntityNotFoundException,
    InvalidRequestException,
)
from app.domain.mapping import order_mapper
from app.domain.models.order import (
    LIFECYCLE_TIMESTAMPS,
    STATUS_CANCELED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_IN_PROGRESS,
    STATUS_PAID,
    TERMINAL_STATUSES,
    Order,
)
from app.domain.models.status import Status
from app.domain.models.table import Table
from app.domain.repositories.auth import UserRepository
from app.domain.repositories.order import OrderItemRepository, OrderRepository, StatusRepository
from app.domain.repositories.table import TableRepository
from app.domain.schemas.common import Page, PageRequest
from app.domain.schemas.order import OrderCreate, OrderResponse, OrderStats, OrderUpdate

logger = structlog.get_logger(__name__)

# Forward-only path; Canceled may follow any non-final status
STATUS_SEQUENCE = (STATUS_CONFIRMED, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_PAID)


class OrderService:
    def __init__(
        self,
        orders: OrderRepository,
        order_items: OrderItemRepository,
        users: UserRepository,
        tables: TableRepository,
        statuses: StatusRepository,
    ):
        self.orders = orders
        self.order_items = order_items
        self.users = users
        self.tables = tables
        self.statuses = statuses

    def create(self, request: OrderCreate) -> OrderResponse:
        user = self.users.get_by_id(request.user_id)
        if user is None:
            raise EntityNotFoundException("User", "id", request.user_id)
        if not user.is_active:
            raise BusinessRuleViolationException("Inactive users cannot open orders", details={"user_id": user.id})
        table = self._get_table(request.table_id)
        status = self._get_status(request.status_id)

        order = order_mapper.to_entity(request, user=user, table=table, status=status)
        now = clock.now()
        order.created_at = now
        order.confirmed_at = now
        self._stamp(order, status, now)
        order = self.orders.create(order)
        logger.info("Order created", order_id=order.id, user_id=user.id, table_id=table.id, status=status.name)
        return order_mapper.to_response(order)

    def get(self, order_id: int) -> OrderResponse:
        return order_mapper.to_response(self.get_entity(order_id))

    def get_entity(self, order_id: int) -> Order:
        order = self.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundException("Order", "id", order_id)
        return order

    def update(self, order_id: int, request: OrderUpdate) -> OrderResponse:
        order = self.get_entity(order_id)
        self._ensure_open(order)
        table = None
        if request.table_id is not None and request.table_id != order.table_id:
            table = self._get_table(request.table_id)

        order = order_mapper.apply_update(order, request)
        if table is not None:
            order.table = table
        order = self.orders.update(order)
        logger.info("Order updated", order_id=order.id)
        return order_mapper.to_response(order)

    def change_status(self, order_id: int, status_id: int) -> OrderResponse:
        return self._transition(self.get_entity(order_id), self._get_status(status_id))

    def change_status_by_name(self, order_id: int, status_name: str) -> OrderResponse:
        status = self.statuses.find_by_name(status_name)
        if status is None:
            raise EntityNotFoundException("Status", "name", status_name)
        return self._transition(self.get_entity(order_id), status)

    def cancel(self, order_id: int) -> OrderResponse:
        return self.change_status_by_name(order_id, STATUS_CANCELED)

    def delete(self, order_id: int) -> None:
        order = self.get_entity(order_id)
        if order.status is not None and order.status.name == STATUS_PAID:
            raise BusinessRuleViolationException("Paid orders cannot be deleted", details={"order_id": order.id})
        for item in self.order_items.find_by_order(order.id):
            self.order_items.delete(item)
        self.orders.delete(order)
        logger.info("Order deleted", order_id=order_id)

    def list(self, page: PageRequest) -> Page:
        return self.orders.list(page).map(order_mapper.to_response)

    def list_by_user(self, user_id: int, page: PageRequest) -> Page:
        return self.orders.find_by_user(user_id, page).map(order_mapper.to_response)

    def list_by_table(self, table_id: int, page: PageRequest) -> Page:
        return self.orders.find_by_table(table_id, page).map(order_mapper.to_response)

    def list_by_status(self, status_id: int, page: PageRequest) -> Page:
        return self.orders.find_by_status(status_id, page).map(order_mapper.to_response)

    def list_by_status_name(self, status_name: str, page: PageRequest) -> Page:
        return self.orders.find_by_status_name(status_name, page).map(order_mapper.to_response)

    def list_between(self, start: datetime, end: datetime, page: PageRequest) -> Page:
        if start > end:
            raise InvalidRequestException("start must not be after end")
        return self.orders.find_by_created_between(start, end, page).map(order_mapper.to_response)

    def search_by_notes(self, term: str, page: PageRequest) -> Page:
        return self.orders.search_by_notes(term, page).map(order_mapper.to_response)

    def stats(self) -> OrderStats:
        now = clock.now()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return OrderStats(
            total_orders=self.orders.count(),
            orders_by_status=self.orders.count_by_status(),
            total_revenue=self.orders.total_revenue(STATUS_PAID),
            orders_today=self.orders.count_created_since(start_of_day),
        )

    def _transition(self, order: Order, status: Status) -> OrderResponse:
        current: Optional[Status] = order.status
        if current is not None and current.id == status.id:
            return order_mapper.to_response(order)

        self._ensure_open(order)
        if current is not None and current.name in STATUS_SEQUENCE and status.name in STATUS_SEQUENCE:
            if STATUS_SEQUENCE.index(status.name) < STATUS_SEQUENCE.index(current.name):
                raise BusinessRuleViolationException(
                    f"Order cannot go back from '{current.name}' to '{status.name}'",
                    details={"order_id": order.id, "from": current.name, "to": status.name},
                )

        order.status = status
        self._stamp(order, status, clock.now())
        order = self.orders.update(order)
        logger.info(
            "Order status changed",
            order_id=order.id,
            from_status=current.name if current is not None else None,
            to_status=status.name,
        )
        return order_mapper.to_response(order)

    @staticmethod
    def _stamp(order: Order, status: Status, now: datetime) -> None:
        attribute = LIFECYCLE_TIMESTAMPS.get(status.name)
        if attribute is not None and getattr(order, attribute) is None:
            setattr(order, attribute, now)

    @staticmethod
    def _ensure_open(order: Order) -> None:
        if order.status is not None and order.status.name in TERMINAL_STATUSES:
            raise BusinessRuleViolationException(
                f"Order is already {order.status.name.lower()}",
                details={"order_id": order.id, "status": order.status.name},
            )

    def _get_table(self, table_id: int) -> Table:
        table = self.tables.get_by_id(table_id)
        if table is None:
            raise EntityNotFoundException("Table", "id", table_id)
        if not table.is_active:
            raise BusinessRuleViolationException("Table is not active", details={"table_id": table.id})
        return table

    def _get_status(self, status_id: int) -> Status:
        status = self.statuses.get_by_id(status_id)
        if status is None:
            raise EntityNotFoundException("Status", "id", status_id)
        return status
