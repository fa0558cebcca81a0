"""
SQLAlchemy Implementation of the Order Repositories.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import joinedload

from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.models.product import Product
from app.domain.models.status import Status
from app.domain.repositories.order import OrderItemRepository, OrderRepository, StatusRepository
from app.domain.schemas.common import Page, PageRequest
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository

ZERO = Decimal("0.00")


class SQLAlchemyStatusRepository(SQLAlchemyRepository[Status], StatusRepository):
    resource_name = "Status"

    def find_by_name(self, name: str) -> Optional[Status]:
        return self.find_one_by(Status.name, name)

    def exists_by_name(self, name: str) -> bool:
        return self.exists_by(Status.name, name)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Status.name, page=page)


class SQLAlchemyOrderRepository(SQLAlchemyRepository[Order], OrderRepository):
    resource_name = "Order"
    load_options = (
        joinedload(Order.user),
        joinedload(Order.table),
        joinedload(Order.status),
    )

    def _order_by(self):
        return [Order.created_at.desc(), Order.id.desc()]

    def find_by_user(self, user_id: int, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Order.user_id == user_id), page)

    def find_by_table(self, table_id: int, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Order.table_id == table_id), page)

    def find_by_status(self, status_id: int, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Order.status_id == status_id), page)

    def find_by_status_name(self, status_name: str, page: PageRequest) -> Page:
        query = self._query().join(Status, Status.id == Order.status_id).filter(Status.name == status_name)
        return self._paginate(query, page)

    def find_by_created_between(self, start: datetime, end: datetime, page: PageRequest) -> Page:
        query = self._query().filter(Order.created_at >= start, Order.created_at <= end)
        return self._paginate(query, page)

    def search_by_notes(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Order.notes, page=page)

    def count_by_status(self) -> Dict[str, int]:
        rows = (
            self.db.query(Status.name, func.count(Order.id))
            .outerjoin(Order, Order.status_id == Status.id)
            .group_by(Status.name)
            .all()
        )
        return {name: count for name, count in rows}

    def count_by_status_id(self, status_id: int) -> int:
        return self.db.query(Order).filter(Order.status_id == status_id).count()

    def count_by_table(self, table_id: int) -> int:
        return self.db.query(Order).filter(Order.table_id == table_id).count()

    def count_created_since(self, since: datetime) -> int:
        return self.db.query(Order).filter(Order.created_at >= since).count()

    def total_revenue(self, status_name: str) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(Order.total_amount), 0))
            .join(Status, Status.id == Order.status_id)
            .filter(Status.name == status_name)
            .scalar()
        )
        return Decimal(str(total or 0)).quantize(ZERO)


class SQLAlchemyOrderItemRepository(SQLAlchemyRepository[OrderItem], OrderItemRepository):
    resource_name = "OrderItem"
    load_options = (joinedload(OrderItem.product).joinedload(Product.category),)

    def find_by_order(self, order_id: int) -> List[OrderItem]:
        return self._query().filter(OrderItem.order_id == order_id).order_by(OrderItem.id).all()

    def find_page_by_order(self, order_id: int, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(OrderItem.order_id == order_id), page)

    def find_by_product(self, product_id: int, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(OrderItem.product_id == product_id), page)

    def count_by_product(self, product_id: int) -> int:
        return self.db.query(OrderItem).filter(OrderItem.product_id == product_id).count()

    def sum_subtotals(self, order_id: int) -> Decimal:
        total = (
            self.db.query(func.coalesce(func.sum(OrderItem.subtotal), 0))
            .filter(OrderItem.order_id == order_id)
            .scalar()
        )
        return Decimal(str(total or 0)).quantize(ZERO)

    def sum_subtotals_by_order(self) -> Dict[int, Decimal]:
        rows = (
            self.db.query(OrderItem.order_id, func.sum(OrderItem.subtotal))
            .group_by(OrderItem.order_id)
            .all()
        )
        return {order_id: Decimal(str(total or 0)).quantize(ZERO) for order_id, total in rows}
