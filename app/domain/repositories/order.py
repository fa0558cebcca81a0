"""
Order Repository Interfaces.
Orders, their line items and the status catalog.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.models.status import Status
from app.domain.repositories.base import BaseRepository
from app.domain.schemas.common import Page, PageRequest


class StatusRepository(BaseRepository[Status]):
    def find_by_name(self, name: str) -> Optional[Status]:
        ...

    def exists_by_name(self, name: str) -> bool:
        ...

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        ...


class OrderRepository(BaseRepository[Order]):
    def find_by_user(self, user_id: int, page: PageRequest) -> Page:
        ...

    def find_by_table(self, table_id: int, page: PageRequest) -> Page:
        ...

    def find_by_status(self, status_id: int, page: PageRequest) -> Page:
        ...

    def find_by_status_name(self, status_name: str, page: PageRequest) -> Page:
        ...

    def find_by_created_between(self, start: datetime, end: datetime, page: PageRequest) -> Page:
        ...

    def search_by_notes(self, term: str, page: PageRequest) -> Page:
        ...

    def count_by_status(self) -> Dict[str, int]:
        ...

    def count_by_status_id(self, status_id: int) -> int:
        ...

    def count_by_table(self, table_id: int) -> int:
        ...

    def count_created_since(self, since: datetime) -> int:
        ...

    def total_revenue(self, status_name: str) -> Decimal:
        ...


class OrderItemRepository(BaseRepository[OrderItem]):
    def find_by_order(self, order_id: int) -> List[OrderItem]:
        ...

    def find_page_by_order(self, order_id: int, page: PageRequest) -> Page:
        ...

    def find_by_product(self, product_id: int, page: PageRequest) -> Page:
        ...

    def count_by_product(self, product_id: int) -> int:
        ...

    def sum_subtotals(self, order_id: int) -> Decimal:
        ...

    def sum_subtotals_by_order(self) -> Dict[int, Decimal]:
        ...
