from datetime import datetime
from decimal import Decimal

from app.domain.mapping import credential_mapper, product_mapper, table_mapper, user_mapper
from app.domain.models.category import Category
from app.domain.models.credential import Credential
from app.domain.models.product import Product
from app.domain.models.user import User
from app.domain.schemas.auth import UserCreate, UserUpdate
from app.domain.schemas.product import ProductCreate
from app.domain.schemas.table import TableCreate


def test_response_copies_same_named_fields_and_properties():
    user = User(id=7, employee_id="EMP0007", first_name="Lucia", last_name="Mendez", is_active=True)
    response = user_mapper.to_response(user)
    assert response.id == 7
    assert response.employee_id == "EMP0007"
    assert response.full_name == "Lucia Mendez"
    assert response.roles == []


def test_extra_values_override_entity_values():
    user = User(id=1, employee_id="EMP0001", first_name="Tom", last_name="Baker", is_active=True)
    response = user_mapper.to_response(user, is_active=False)
    assert response.is_active is False


def test_none_entity_maps_to_none():
    assert user_mapper.to_response(None) is None


def test_nested_relation_is_projected():
    category = Category(id=3, name="Beverages", description="Drinks", is_active=True)
    product = Product(id=9, category=category, name="Latte", price=Decimal("4.50"), description="Milk coffee")
    response = product_mapper.to_response(product)
    assert response.category.name == "Beverages"
    assert response.price == Decimal("4.50")


def test_missing_nested_relation_maps_to_none():
    product = Product(id=9, name="Latte", price=Decimal("4.50"), description="Milk coffee")
    assert product_mapper.to_response(product).category is None


def test_renamed_and_computed_fields():
    expiry = datetime(2024, 1, 1, 10, 0)
    credential = Credential(
        id=2,
        user_id=1,
        username="tom",
        password_hash="x",
        enabled=True,
        login_attempts=0,
        recuperation_tkn="ABCDEFGHIJ",
        recuperation_tkn_exp=expiry,
    )
    response = credential_mapper.to_response(credential)
    assert response.has_recuperation_token is True
    assert response.recuperation_token_expiry == expiry
    assert "password_hash" not in response.model_dump()


def test_to_entity_keeps_columns_and_adds_relations():
    category = Category(id=3, name="Beverages", description="Drinks", is_active=True)
    request = ProductCreate(category_id=3, name="Latte", price=Decimal("4.50"), description="Milk coffee")
    product = product_mapper.to_entity(request, category=category)
    assert isinstance(product, Product)
    assert product.id is None
    assert product.name == "Latte"
    assert product.category is category


def test_to_entity_round_trips_through_response():
    request = TableCreate(table_number="9", capacity=2)
    response = table_mapper.to_response(table_mapper.to_entity(request))
    assert response.table_number == "9"
    assert response.capacity == 2
    assert response.status == "free"


def test_apply_update_only_touches_fields_that_were_sent():
    user = user_mapper.to_entity(UserCreate(employee_id="EMP0002", first_name="Ana", last_name="Lopez"))
    user_mapper.apply_update(user, UserUpdate(first_name="Anna"))
    assert user.first_name == "Anna"
    assert user.last_name == "Lopez"
    assert user.employee_id == "EMP0002"
