from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.core.exceptions import (
    BusinessRuleViolationException,
    DuplicateResourceException,
    EntityNotFoundException,
    InvalidRequestException,
)
from app.domain.schemas.common import PageRequest
from app.domain.schemas.product import CategoryCreate, ProductCreate, ProductUpdate
from app.domain.schemas.table import TableCreate, TableUpdate


def test_product_is_returned_with_its_category(product_service, latte):
    fetched = product_service.get(latte.id)
    assert fetched.name == "Latte"
    assert fetched.price == Decimal("4.50")
    assert fetched.category.name == "Beverages"
    assert fetched.created_at is not None


def test_product_price_must_be_positive():
    with pytest.raises(ValidationError):
        ProductCreate(category_id=1, name="Free", price=Decimal("0"), description="Nothing")


def test_product_requires_existing_category(product_service):
    with pytest.raises(EntityNotFoundException):
        product_service.create(
            ProductCreate(category_id=42, name="Mocha", price=Decimal("5.00"), description="Chocolate coffee")
        )


def test_product_name_unique_within_category(product_service, category_service, latte):
    with pytest.raises(DuplicateResourceException):
        product_service.create(
            ProductCreate(
                category_id=latte.category.id, name="Latte", price=Decimal("3.90"), description="Another latte"
            )
        )

    desserts = category_service.create(CategoryCreate(name="Desserts", description="Sweet things"))
    other = product_service.create(
        ProductCreate(category_id=desserts.id, name="Latte", price=Decimal("3.90"), description="Latte cake")
    )
    assert other.category.name == "Desserts"


def test_update_product_price_and_category(product_service, category_service, latte):
    desserts = category_service.create(CategoryCreate(name="Desserts", description="Sweet things"))
    updated = product_service.update(latte.id, ProductUpdate(price=Decimal("4.90"), category_id=desserts.id))
    assert updated.price == Decimal("4.90")
    assert updated.category.name == "Desserts"
    assert updated.description == "Espresso with steamed milk"


def test_product_update_rejects_null_price(product_service, latte):
    with pytest.raises(InvalidRequestException):
        product_service.update(latte.id, ProductUpdate.model_validate({"price": None}))
    assert product_service.get(latte.id).price == Decimal("4.50")


def test_category_with_products_cannot_be_deleted(category_service, product_service, latte):
    with pytest.raises(BusinessRuleViolationException):
        category_service.delete(latte.category.id)

    product_service.delete(latte.id)
    category_service.delete(latte.category.id)
    with pytest.raises(EntityNotFoundException):
        category_service.get(latte.category.id)


def test_category_names_are_unique(category_service, latte):
    with pytest.raises(DuplicateResourceException):
        category_service.create(CategoryCreate(name="Beverages", description="Duplicate"))


def test_inactive_products_are_not_listed_as_active(product_service, latte):
    product_service.set_active(latte.id, False)
    assert product_service.list_active(PageRequest()).total == 0
    assert product_service.list(PageRequest()).total == 1


def test_price_range_filter(product_service, latte):
    product_service.create(
        ProductCreate(
            category_id=latte.category.id, name="Espresso", price=Decimal("2.00"), description="Short coffee"
        )
    )
    page = product_service.list_by_price_range(Decimal("3.00"), Decimal("5.00"), PageRequest())
    assert [p.name for p in page.items] == ["Latte"]

    with pytest.raises(InvalidRequestException):
        product_service.list_by_price_range(Decimal("5.00"), Decimal("3.00"), PageRequest())


def test_product_stats(product_service, latte):
    product_service.create(
        ProductCreate(
            category_id=latte.category.id, name="Espresso", price=Decimal("2.00"), description="Short coffee"
        )
    )
    stats = product_service.stats()
    assert stats.total_products == 2
    assert stats.active_products == 2
    assert stats.min_price == Decimal("2.00")
    assert stats.max_price == Decimal("4.50")
    assert stats.average_price == Decimal("3.25")


def test_search_products_by_name(product_service, latte):
    assert product_service.search_by_name("LAT", PageRequest()).total == 1
    assert product_service.search_by_name("tea", PageRequest()).total == 0


def test_pagination_metadata(product_service, latte):
    for index in range(4):
        product_service.create(
            ProductCreate(
                category_id=latte.category.id,
                name=f"Tea {index}",
                price=Decimal("2.50"),
                description="Loose leaf tea",
            )
        )
    page = product_service.list(PageRequest(page=2, page_size=2))
    assert page.total == 5
    assert page.total_pages == 3
    assert len(page.items) == 2


def test_table_numbers_are_unique(table_service, table):
    with pytest.raises(DuplicateResourceException):
        table_service.create(TableCreate(table_number="12", capacity=2))


def test_table_status_changes(table_service, table):
    assert table_service.change_status(table.id, "occupied").status == "occupied"
    with pytest.raises(InvalidRequestException):
        table_service.change_status(table.id, "dirty")


def test_table_update_validates_status():
    with pytest.raises(ValidationError):
        TableUpdate(status="dirty")
