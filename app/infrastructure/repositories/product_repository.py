"""
SQLAlchemy Implementation of the Catalog Repositories.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import joinedload

from app.domain.models.category import Category
from app.domain.models.product import Product
from app.domain.repositories.product import CategoryRepository, ProductRepository
from app.domain.schemas.common import Page, PageRequest
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCategoryRepository(SQLAlchemyRepository[Category], CategoryRepository):
    """Category repository implementation using SQLAlchemy."""

    resource_name = "Category"

    def find_by_name(self, name: str) -> Optional[Category]:
        return self.find_one_by(Category.name, name)

    def exists_by_name(self, name: str) -> bool:
        return self.exists_by(Category.name, name)

    def find_active(self, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Category.is_active.is_(True)), page)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Category.name, page=page)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Category.description, page=page)


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    resource_name = "Product"
    load_options = (joinedload(Product.category),)

    def find_by_category(self, category_id: int, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Product.category_id == category_id), page)

    def count_by_category(self, category_id: int) -> int:
        return self.db.query(Product).filter(Product.category_id == category_id).count()

    def find_active(self, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(Product.is_active.is_(True)), page)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Product.name, page=page)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Product.description, page=page)

    def find_by_price_range(self, min_price: Decimal, max_price: Decimal, page: PageRequest) -> Page:
        query = self._query().filter(Product.price >= min_price, Product.price <= max_price)
        return self._paginate(query, page)

    def exists_by_name_in_category(self, name: str, category_id: int) -> bool:
        query = self.db.query(Product).filter(Product.name == name, Product.category_id == category_id)
        return self.db.query(query.exists()).scalar()

    def price_summary(self) -> dict:
        row = self.db.query(
            func.count(Product.id),
            func.coalesce(func.sum(case((Product.is_active.is_(True), 1), else_=0)), 0),
            func.avg(Product.price),
            func.min(Product.price),
            func.max(Product.price),
        ).one()
        total, active, average, minimum, maximum = row
        return {
            "total": total or 0,
            "active": int(active or 0),
            "average": Decimal(str(average or 0)).quantize(Decimal("0.01")),
            "min": Decimal(str(minimum or 0)),
            "max": Decimal(str(maximum or 0)),
        }

    def list_by_ids(self, ids: List[int]) -> List[Product]:
        if not ids:
            return []
        return self._query().filter(Product.id.in_(ids)).order_by(Product.id).all()
