"""Product service: catalog categories and products."""

from decimal import Decimal

import structlog

from app.core.exceptions import (
    BusinessRuleViolationException,
    DuplicateResourceException,
    EntityNotFoundException,
    InvalidRequestException,
)
from app.domain.mapping import category_mapper, product_mapper
from app.domain.models.category import Category
from app.domain.models.product import Product
from app.domain.repositories.product import CategoryRepository, ProductRepository
from app.domain.schemas.common import Page, PageRequest
from app.domain.schemas.product import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductResponse,
    ProductStats,
    ProductUpdate,
)

logger = structlog.get_logger(__name__)


class CategoryService:
    def __init__(self, categories: CategoryRepository, products: ProductRepository):
        self.categories = categories
        self.products = products

    def create(self, request: CategoryCreate) -> CategoryResponse:
        if self.categories.exists_by_name(request.name):
            raise DuplicateResourceException("Category", "name", request.name)

        category = self.categories.create(category_mapper.to_entity(request))
        logger.info("Category created", category_id=category.id, name=category.name)
        return category_mapper.to_response(category)

    def get(self, category_id: int) -> CategoryResponse:
        return category_mapper.to_response(self.get_entity(category_id))

    def get_by_name(self, name: str) -> CategoryResponse:
        category = self.categories.find_by_name(name)
        if category is None:
            raise EntityNotFoundException("Category", "name", name)
        return category_mapper.to_response(category)

    def get_entity(self, category_id: int) -> Category:
        category = self.categories.get_by_id(category_id)
        if category is None:
            raise EntityNotFoundException("Category", "id", category_id)
        return category

    def update(self, category_id: int, request: CategoryUpdate) -> CategoryResponse:
        category = self.get_entity(category_id)
        if (
            request.name is not None
            and request.name != category.name
            and self.categories.exists_by_name(request.name)
        ):
            raise DuplicateResourceException("Category", "name", request.name)

        category = self.categories.update(category_mapper.apply_update(category, request))
        logger.info("Category updated", category_id=category.id)
        return category_mapper.to_response(category)

    def delete(self, category_id: int) -> None:
        category = self.get_entity(category_id)
        products = self.products.count_by_category(category.id)
        if products:
            raise BusinessRuleViolationException(
                f"Category '{category.name}' still has {products} product(s)",
                details={"category_id": category.id, "products": products},
            )
        self.categories.delete(category)
        logger.info("Category deleted", category_id=category_id)

    def set_active(self, category_id: int, active: bool) -> CategoryResponse:
        category = self.get_entity(category_id)
        category.is_active = active
        category = self.categories.update(category)
        logger.info("Category activation changed", category_id=category.id, is_active=active)
        return category_mapper.to_response(category)

    def list(self, page: PageRequest) -> Page:
        return self.categories.list(page).map(category_mapper.to_response)

    def list_active(self, page: PageRequest) -> Page:
        return self.categories.find_active(page).map(category_mapper.to_response)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.categories.search_by_name(term, page).map(category_mapper.to_response)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.categories.search_by_description(term, page).map(category_mapper.to_response)


class ProductService:
    def __init__(self, products: ProductRepository, categories: CategoryRepository):
        self.products = products
        self.categories = categories

    def create(self, request: ProductCreate) -> ProductResponse:
        category = self._get_category(request.category_id)
        if self.products.exists_by_name_in_category(request.name, category.id):
            raise DuplicateResourceException("Product", "name", request.name)

        product = self.products.create(product_mapper.to_entity(request, category=category))
        logger.info("Product created", product_id=product.id, name=product.name, price=str(product.price))
        return product_mapper.to_response(product)

    def get(self, product_id: int) -> ProductResponse:
        return product_mapper.to_response(self.get_entity(product_id))

    def get_entity(self, product_id: int) -> Product:
        product = self.products.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundException("Product", "id", product_id)
        return product

    def update(self, product_id: int, request: ProductUpdate) -> ProductResponse:
        product = self.get_entity(product_id)
        category = None
        if request.category_id is not None and request.category_id != product.category_id:
            category = self._get_category(request.category_id)

        name = request.name if request.name is not None else product.name
        category_id = category.id if category is not None else product.category_id
        if (name, category_id) != (product.name, product.category_id) and \
                self.products.exists_by_name_in_category(name, category_id):
            raise DuplicateResourceException("Product", "name", name)

        product = product_mapper.apply_update(product, request)
        if category is not None:
            product.category = category
        product = self.products.update(product)
        logger.info("Product updated", product_id=product.id)
        return product_mapper.to_response(product)

    def delete(self, product_id: int) -> None:
        self.products.delete(self.get_entity(product_id))
        logger.info("Product deleted", product_id=product_id)

    def set_active(self, product_id: int, active: bool) -> ProductResponse:
        product = self.get_entity(product_id)
        product.is_active = active
        product = self.products.update(product)
        logger.info("Product activation changed", product_id=product.id, is_active=active)
        return product_mapper.to_response(product)

    def list(self, page: PageRequest) -> Page:
        return self.products.list(page).map(product_mapper.to_response)

    def list_active(self, page: PageRequest) -> Page:
        return self.products.find_active(page).map(product_mapper.to_response)

    def list_by_category(self, category_id: int, page: PageRequest) -> Page:
        self._get_category(category_id)
        return self.products.find_by_category(category_id, page).map(product_mapper.to_response)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.products.search_by_name(term, page).map(product_mapper.to_response)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.products.search_by_description(term, page).map(product_mapper.to_response)

    def list_by_price_range(self, min_price: Decimal, max_price: Decimal, page: PageRequest) -> Page:
        if min_price > max_price:
            raise InvalidRequestException(
                "min_price must not exceed max_price",
                details={"min_price": str(min_price), "max_price": str(max_price)},
            )
        return self.products.find_by_price_range(min_price, max_price, page).map(product_mapper.to_response)

    def stats(self) -> ProductStats:
        summary = self.products.price_summary()
        return ProductStats(
            total_products=summary["total"],
            active_products=summary["active"],
            average_price=summary["average"],
            min_price=summary["min"],
            max_price=summary["max"],
        )

    def _get_category(self, category_id: int) -> Category:
        category = self.categories.get_by_id(category_id)
        if category is None:
            raise EntityNotFoundException("Category", "id", category_id)
        return category
