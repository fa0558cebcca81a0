"""
Product Repository Interfaces.
Defines specific data access operations for the catalog.
"""

from decimal import Decimal
from typing import List, Optional

from app.domain.models.category import Category
from app.domain.models.product import Product
from app.domain.repositories.base import BaseRepository
from app.domain.schemas.common import Page, PageRequest


class CategoryRepository(BaseRepository[Category]):
    def find_by_name(self, name: str) -> Optional[Category]:
        ...

    def exists_by_name(self, name: str) -> bool:
        ...

    def find_active(self, page: PageRequest) -> Page:
        ...

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        ...

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        ...


class ProductRepository(BaseRepository[Product]):
    def find_by_category(self, category_id: int, page: PageRequest) -> Page:
        ...

    def count_by_category(self, category_id: int) -> int:
        ...

    def find_active(self, page: PageRequest) -> Page:
        ...

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        ...

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        ...

    def find_by_price_range(self, min_price: Decimal, max_price: Decimal, page: PageRequest) -> Page:
        ...

    def exists_by_name_in_category(self, name: str, category_id: int) -> bool:
        ...

    def price_summary(self) -> dict:
        """Count, active count, average, min and max price."""
        ...

    def list_by_ids(self, ids: List[int]) -> List[Product]:
        ...
