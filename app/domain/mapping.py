"""
Entity to response projection.

One ``EntityMapper`` per entity/response pair, driven by a small field table.
Mappers never persist or look anything up: relations that the caller did
not load raise from SQLAlchemy instead of being fetched lazily. The only
check they make is refusing nulls for NOT NULL columns on update.
"""

from typing import Any, Callable, Dict, Generic, Iterable, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import inspect

from app.core import clock
from app.core.exceptions import InvalidRequestException
from app.domain.models.assignment import RolesPermission, UsersRoles
from app.domain.models.category import Category
from app.domain.models.credential import Credential
from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.models.permission import Permission
from app.domain.models.product import Product
from app.domain.models.role import Role
from app.domain.models.session import UserSession, token_preview
from app.domain.models.status import Status
from app.domain.models.table import Table
from app.domain.models.user import User
from app.domain.schemas.auth import (
    CredentialResponse,
    PermissionResponse,
    RoleResponse,
    RolesPermissionResponse,
    SessionResponse,
    UserResponse,
    UsersRolesResponse,
)
from app.domain.schemas.order import OrderItemResponse, OrderResponse, StatusResponse
from app.domain.schemas.product import CategoryResponse, ProductResponse
from app.domain.schemas.table import TableResponse

E = TypeVar("E")
R = TypeVar("R", bound=BaseModel)

FieldSource = Union[str, Callable[[Any], Any]]

SERVER_ASSIGNED = frozenset({"id", "created_at", "updated_at"})


class EntityMapper(Generic[E, R]):
    def __init__(
        self,
        entity_cls: Type[E],
        response_cls: Type[R],
        fields: Optional[Dict[str, FieldSource]] = None,
        nested: Optional[Dict[str, "EntityMapper"]] = None,
        create_exclude: Iterable[str] = SERVER_ASSIGNED,
    ):
        self.entity_cls = entity_cls
        self.response_cls = response_cls
        self.fields = fields or {}
        self.nested = nested or {}
        self.create_exclude = frozenset(create_exclude)

    def to_response(self, entity: Optional[E], **extra: Any) -> Optional[R]:
        """Project ``entity`` onto the response model; ``extra`` wins over entity values."""
        if entity is None:
            return None

        values: Dict[str, Any] = {}
        for name in self.response_cls.model_fields:
            if name in extra:
                values[name] = extra[name]
            elif name in self.nested:
                values[name] = self.nested[name].to_response(getattr(entity, name))
            elif name in self.fields:
                source = self.fields[name]
                values[name] = source(entity) if callable(source) else getattr(entity, source)
            elif hasattr(entity, name):
                values[name] = getattr(entity, name)
        return self.response_cls(**values)

    def to_entity(self, request: BaseModel, **relations: Any) -> E:
        """Build a new, transient entity from the request's column fields."""
        data = request.model_dump()
        kwargs = {
            key: value
            for key, value in data.items()
            if key in self._columns() and key not in self.create_exclude
        }
        kwargs.update(relations)
        return self.entity_cls(**kwargs)

    def apply_update(self, entity: E, request: BaseModel) -> E:
        """Copy the fields explicitly set on an update request onto ``entity``.

        An explicit null for a NOT NULL column is rejected before anything is
        written.
        """
        values = {
            key: value
            for key, value in request.model_dump(exclude_unset=True).items()
            if key in self._columns() and key not in self.create_exclude
        }
        nulls = sorted(key for key, value in values.items() if value is None and key in self._required_columns())
        if nulls:
            raise InvalidRequestException(
                f"{self.entity_cls.__name__} fields cannot be null: {', '.join(nulls)}",
                details={"fields": nulls},
            )
        for key, value in values.items():
            setattr(entity, key, value)
        return entity

    def _columns(self) -> frozenset:
        return frozenset(attr.key for attr in inspect(self.entity_cls).column_attrs)

    def _required_columns(self) -> frozenset:
        return frozenset(
            attr.key
            for attr in inspect(self.entity_cls).column_attrs
            if not all(column.nullable for column in attr.columns)
        )


# Mapping table

role_mapper = EntityMapper(Role, RoleResponse)
permission_mapper = EntityMapper(Permission, PermissionResponse)
user_mapper = EntityMapper(User, UserResponse)

users_roles_mapper = EntityMapper(
    UsersRoles,
    UsersRolesResponse,
    fields={"user_id": "users_id", "role_id": "roles_id"},
    nested={"user": user_mapper, "role": role_mapper},
)

roles_permission_mapper = EntityMapper(
    RolesPermission,
    RolesPermissionResponse,
    nested={"role": role_mapper, "permission": permission_mapper},
)

credential_mapper = EntityMapper(
    Credential,
    CredentialResponse,
    fields={
        "has_recuperation_token": lambda c: c.recuperation_tkn is not None,
        "recuperation_token_expiry": "recuperation_tkn_exp",
    },
    nested={"user": user_mapper},
)

session_mapper = EntityMapper(
    UserSession,
    SessionResponse,
    fields={
        "access_token_preview": lambda s: token_preview(s.access_token),
        "refresh_token_preview": lambda s: token_preview(s.refresh_token),
        "is_expired": lambda s: s.is_expired_at(clock.now()),
        "state": lambda s: s.state_at(clock.now()),
    },
    nested={"user": user_mapper},
)

status_mapper = EntityMapper(Status, StatusResponse)
category_mapper = EntityMapper(Category, CategoryResponse)
product_mapper = EntityMapper(Product, ProductResponse, nested={"category": category_mapper})
table_mapper = EntityMapper(Table, TableResponse)

order_mapper = EntityMapper(
    Order,
    OrderResponse,
    nested={"user": user_mapper, "table": table_mapper, "status": status_mapper},
)

order_item_mapper = EntityMapper(OrderItem, OrderItemResponse, nested={"product": product_mapper})
