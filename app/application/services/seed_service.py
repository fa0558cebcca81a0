"""
Default data loaded on startup.

Every step looks records up by their unique key first, so running the seed
against an already populated database changes nothing.
"""

from decimal import Decimal
from typing import Dict, Iterable, List

import structlog

from app.config import get_settings
from app.core.security import PasswordHasher
from app.domain.models.assignment import AssignmentKey, RolesPermission, UsersRoles
from app.domain.models.category import Category
from app.domain.models.credential import Credential
from app.domain.models.order import (
    STATUS_CANCELED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_IN_PROGRESS,
    STATUS_PAID,
)
from app.domain.models.permission import Permission
from app.domain.models.product import Product
from app.domain.models.role import Role
from app.domain.models.status import Status
from app.domain.models.table import TABLE_STATUS_FREE, Table
from app.domain.models.user import User
from app.domain.repositories.auth import (
    CredentialRepository,
    PermissionRepository,
    RoleRepository,
    RolesPermissionRepository,
    UserRepository,
    UsersRolesRepository,
)
from app.domain.repositories.order import StatusRepository
from app.domain.repositories.product import CategoryRepository, ProductRepository
from app.domain.repositories.table import TableRepository

settings = get_settings()
logger = structlog.get_logger(__name__)

ROLE_ADMIN = "ADMIN"
ROLE_HOST = "HOST"
ROLE_COOK = "COOK"

ROLES = {
    ROLE_ADMIN: "System administrator",
    ROLE_HOST: "Front of house staff",
    ROLE_COOK: "Kitchen staff",
}

PROFILE = ["PERMISSION_PROFILE_VIEW", "PERMISSION_PROFILE_UPDATE"]

ROLE_PERMISSIONS: Dict[str, List[str]] = {
    ROLE_ADMIN: [
        "PERMISSION_SYSTEM_ADMIN",
        "PERMISSION_USER_READ",
        "PERMISSION_USER_MANAGEMENT",
        "PERMISSION_USER_ACCOUNT_CONTROL",
        "PERMISSION_USER_PASSWORD_RESET",
        "PERMISSION_ROLE_READ",
        "PERMISSION_ROLE_CREATE",
        "PERMISSION_ROLE_UPDATE",
        "PERMISSION_ROLE_DELETE",
        "PERMISSION_PERMISSION_READ",
        "PERMISSION_PERMISSION_CREATE",
        "PERMISSION_PERMISSION_UPDATE",
        "PERMISSION_PERMISSION_DELETE",
        *PROFILE,
        "PERMISSION_ORDER_CREATE",
        "PERMISSION_ORDER_READ",
        "PERMISSION_ORDER_UPDATE",
        "PERMISSION_ORDER_DELETE",
        "PERMISSION_ORDER_STATS",
        "PERMISSION_ORDER_STATUS_MANAGE",
        "CREATE_CATEGORY",
        "READ_CATEGORY",
        "UPDATE_CATEGORY",
        "DELETE_CATEGORY",
        "CREATE_PRODUCT",
        "READ_PRODUCT",
        "UPDATE_PRODUCT",
        "DELETE_PRODUCT",
        "TOGGLE_PRODUCT",
        "STATS_PRODUCT",
        "REPORT_PRODUCT",
        "CREATE_TABLE",
        "READ_TABLE",
        "UPDATE_TABLE",
        "DELETE_TABLE",
    ],
    ROLE_HOST: [
        *PROFILE,
        "PERMISSION_ORDER_CREATE",
        "PERMISSION_ORDER_READ",
        "PERMISSION_ORDER_UPDATE",
        "PERMISSION_ORDER_STATS",
        "READ_CATEGORY",
        "READ_PRODUCT",
        "READ_TABLE",
    ],
    ROLE_COOK: [
        *PROFILE,
        "PERMISSION_ORDER_READ",
        "PERMISSION_ORDER_UPDATE",
        "PERMISSION_ORDER_STATS",
        "READ_CATEGORY",
        "READ_PRODUCT",
        "READ_TABLE",
    ],
}

STATUSES = {
    STATUS_CONFIRMED: "Order received and confirmed",
    STATUS_IN_PROGRESS: "Being prepared in the kitchen",
    STATUS_COMPLETED: "Served to the table",
    STATUS_PAID: "Settled by the customer",
    STATUS_CANCELED: "Canceled before completion",
}

# Table "0" is the takeaway counter
TABLES = [("0", 0), ("1", 4), ("2", 6), ("3", 4), ("4", 4), ("5", 4), ("6", 6), ("7", 4)]

CATALOG = {
    ("Pizzas", "Wood-fired artisan pizzas"): [
        ("Pizza Margherita", "8.50", "Tomato, mozzarella and fresh basil"),
        ("Pizza Pepperoni", "9.50", "Mozzarella and baked pepperoni"),
        ("Pizza Cuatro Quesos", "10.00", "Mozzarella, gorgonzola, parmesan and provolone"),
    ],
    ("Pastas", "Italian classics with house sauces"): [
        ("Spaghetti Bolognese", "7.50", "Bolognese sauce with ground beef"),
        ("Fettuccine Alfredo", "7.80", "Creamy parmesan and butter sauce"),
        ("Lasagna Clasica", "8.20", "Layers of pasta, meat, bechamel and cheese"),
    ],
    ("Bebidas", "Soft drinks, juices and Italian beverages"): [
        ("Limonada Italiana", "2.50", "Lemonade with a hint of mint"),
        ("San Pellegrino", "3.00", "Sparkling water, 500ml bottle"),
        ("Coca-Cola", "2.00", "355ml can"),
    ],
    ("Postres", "Italian style desserts"): [
        ("Tiramisu", "4.50", "Coffee, cream and cocoa"),
        ("Panna Cotta", "4.00", "Cream custard with red berry coulis"),
    ],
}

# (username, first name, last name, role)
USERS = [
    ("admin_user", "Admin", "User", ROLE_ADMIN),
    ("host_user", "Host", "User", ROLE_HOST),
    ("cook_user", "Cook", "User", ROLE_COOK),
]


class SeedService:
    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        permissions: PermissionRepository,
        users_roles: UsersRolesRepository,
        roles_permission: RolesPermissionRepository,
        credentials: CredentialRepository,
        statuses: StatusRepository,
        tables: TableRepository,
        categories: CategoryRepository,
        products: ProductRepository,
        hasher: PasswordHasher,
    ):
        self.users = users
        self.roles = roles
        self.permissions = permissions
        self.users_roles = users_roles
        self.roles_permission = roles_permission
        self.credentials = credentials
        self.statuses = statuses
        self.tables = tables
        self.categories = categories
        self.products = products
        self.hasher = hasher

    def run(self) -> None:
        self.seed_roles_and_permissions()
        self.seed_statuses()
        self.seed_tables()
        self.seed_catalog()
        self.seed_users()
        logger.info("Default data verified")

    def seed_roles_and_permissions(self) -> Dict[str, Role]:
        roles = {name: self._role(name, description) for name, description in ROLES.items()}
        for role_name, permission_names in ROLE_PERMISSIONS.items():
            self._grant(roles[role_name], self._permissions(permission_names))
        return roles

    def seed_statuses(self) -> None:
        for name, description in STATUSES.items():
            if not self.statuses.exists_by_name(name):
                self.statuses.create(Status(name=name, description=description))
                logger.info("Status seeded", name=name)

    def seed_tables(self) -> None:
        for number, capacity in TABLES:
            if not self.tables.exists_by_table_number(number):
                self.tables.create(
                    Table(table_number=number, capacity=capacity, is_active=True, status=TABLE_STATUS_FREE)
                )
                logger.info("Table seeded", table_number=number)

    def seed_catalog(self) -> None:
        if self.products.count():
            logger.info("Products already present, catalog seed skipped")
            return
        for (category_name, category_description), items in CATALOG.items():
            category = self.categories.find_by_name(category_name)
            if category is None:
                category = self.categories.create(
                    Category(name=category_name, description=category_description, is_active=True)
                )
            for name, price, description in items:
                self.products.create(
                    Product(
                        category=category,
                        name=name,
                        price=Decimal(price),
                        is_active=True,
                        description=description,
                    )
                )
        logger.info("Demo catalog seeded", categories=len(CATALOG))

    def seed_users(self) -> None:
        for index, (username, first_name, last_name, role_name) in enumerate(USERS):
            if self.credentials.exists_by_username(username):
                continue
            role = self.roles.find_by_name(role_name)
            if role is None:
                logger.warning("Role missing, user not seeded", role=role_name, username=username)
                continue

            employee_id = f"EMP{index:04d}"
            user = self.users.find_by_employee_id(employee_id)
            if user is None:
                user = self.users.create(
                    User(employee_id=employee_id, first_name=first_name, last_name=last_name, is_active=True)
                )
            self.credentials.create(
                Credential(
                    user=user,
                    username=username,
                    password_hash=self.hasher.hash(settings.DEFAULT_PASSWORD),
                    enabled=True,
                    login_attempts=0,
                )
            )
            if not self.users_roles.exists_by_key(AssignmentKey(user.id, role.id)):
                self.users_roles.create(UsersRoles(users_id=user.id, roles_id=role.id))
            logger.info("User seeded", username=username, role=role_name)

    def _role(self, name: str, description: str) -> Role:
        role = self.roles.find_by_name(name)
        if role is None:
            role = self.roles.create(Role(name=name, description=description))
            logger.info("Role seeded", name=name)
        return role

    def _permissions(self, names: Iterable[str]) -> List[Permission]:
        permissions = []
        for name in names:
            permission = self.permissions.find_by_name(name)
            if permission is None:
                permission = self.permissions.create(Permission(name=name, description=name.replace("_", " ")))
            permissions.append(permission)
        return permissions

    def _grant(self, role: Role, permissions: Iterable[Permission]) -> None:
        for permission in permissions:
            if not self.roles_permission.exists_by_key(AssignmentKey(role.id, permission.id)):
                self.roles_permission.create(RolesPermission(role_id=role.id, permission_id=permission.id))
                logger.debug("Permission granted", role=role.name, permission=permission.name)
