"""
API Dependencies.

Repository and service providers. Each one takes the request's database
session through ``Depends(get_db)`` and can also be called directly with a
session (startup seeding, scheduler jobs).
"""

from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from app.application.services.assignment_service import AssignmentService
from app.application.services.authentication_service import AuthenticationService
from app.application.services.credential_service import CredentialService
from app.application.services.order_item_service import OrderItemService
from app.application.services.order_service import OrderService
from app.application.services.seed_service import SeedService
from app.application.services.session_service import SessionService
from app.core.security import BcryptPasswordHasher, PasswordHasher
from app.domain.models.assignment import RolesPermission, UsersRoles
from app.domain.models.category import Category
from app.domain.models.credential import Credential
from app.domain.models.order import Order
from app.domain.models.order_item import OrderItem
from app.domain.models.permission import Permission
from app.domain.models.product import Product
from app.domain.models.role import Role
from app.domain.models.session import UserSession
from app.domain.models.status import Status
from app.domain.models.table import Table
from app.domain.models.user import User
from app.infrastructure.database import get_db
from app.infrastructure.repositories.auth_repository import (
    SQLAlchemyCredentialRepository,
    SQLAlchemyPermissionRepository,
    SQLAlchemyRoleRepository,
    SQLAlchemyRolesPermissionRepository,
    SQLAlchemySessionRepository,
    SQLAlchemyUserRepository,
    SQLAlchemyUsersRolesRepository,
)
from app.infrastructure.repositories.order_repository import (
    SQLAlchemyOrderItemRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyStatusRepository,
)
from app.infrastructure.repositories.product_repository import (
    SQLAlchemyCategoryRepository,
    SQLAlchemyProductRepository,
)
from app.infrastructure.repositories.table_repository import SQLAlchemyTableRepository

_password_hasher = BcryptPasswordHasher()


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


class Repositories:
    """Every repository bound to one database session."""

    def __init__(self, db: Session):
        self.users = SQLAlchemyUserRepository(db, User)
        self.roles = SQLAlchemyRoleRepository(db, Role)
        self.permissions = SQLAlchemyPermissionRepository(db, Permission)
        self.users_roles = SQLAlchemyUsersRolesRepository(db, UsersRoles)
        self.roles_permission = SQLAlchemyRolesPermissionRepository(db, RolesPermission)
        self.credentials = SQLAlchemyCredentialRepository(db, Credential)
        self.sessions = SQLAlchemySessionRepository(db, UserSession)
        self.statuses = SQLAlchemyStatusRepository(db, Status)
        self.orders = SQLAlchemyOrderRepository(db, Order)
        self.order_items = SQLAlchemyOrderItemRepository(db, OrderItem)
        self.categories = SQLAlchemyCategoryRepository(db, Category)
        self.products = SQLAlchemyProductRepository(db, Product)
        self.tables = SQLAlchemyTableRepository(db, Table)


def get_repositories(db: Session = Depends(get_db)) -> Repositories:
    return Repositories(db)


def get_session_service(db: Session = Depends(get_db)) -> SessionService:
    return SessionService(SQLAlchemySessionRepository(db, UserSession))


def get_credential_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> CredentialService:
    repos = Repositories(db)
    return CredentialService(repos.credentials, repos.users, hasher)


def get_authentication_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthenticationService:
    repos = Repositories(db)
    return AuthenticationService(
        repos.credentials,
        repos.roles,
        CredentialService(repos.credentials, repos.users, hasher),
        SessionService(repos.sessions),
        hasher,
    )


def get_assignment_service(db: Session = Depends(get_db)) -> AssignmentService:
    repos = Repositories(db)
    return AssignmentService(
        repos.users, repos.roles, repos.permissions, repos.users_roles, repos.roles_permission
    )


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    repos = Repositories(db)
    return OrderService(repos.orders, repos.order_items, repos.users, repos.tables, repos.statuses)


def get_order_item_service(db: Session = Depends(get_db)) -> OrderItemService:
    repos = Repositories(db)
    return OrderItemService(repos.order_items, repos.orders, repos.products)


def get_seed_service(db: Session, hasher: Optional[PasswordHasher] = None) -> SeedService:
    repos = Repositories(db)
    return SeedService(
        repos.users,
        repos.roles,
        repos.permissions,
        repos.users_roles,
        repos.roles_permission,
        repos.credentials,
        repos.statuses,
        repos.tables,
        repos.categories,
        repos.products,
        hasher or get_password_hasher(),
    )
