import os

# Settings are read once at import time, so the environment must be set first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["ENVIRONMENT"] = "test"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["SEED_DEFAULT_DATA"] = "false"

from decimal import Decimal

import pytest

from app.application.services.assignment_service import AssignmentService
from app.application.services.authentication_service import AuthenticationService
from app.application.services.credential_service import CredentialService
from app.application.services.order_item_service import OrderItemService
from app.application.services.order_service import OrderService
from app.application.services.product_service import CategoryService, ProductService
from app.application.services.role_service import PermissionService, RoleService
from app.application.services.session_service import SessionService
from app.application.services.status_service import StatusService
from app.application.services.table_service import TableService
from app.application.services.user_service import UserService
from app.domain.schemas.auth import CredentialCreate, UserCreate
from app.domain.schemas.order import StatusCreate
from app.domain.schemas.product import CategoryCreate, ProductCreate
from app.domain.schemas.table import TableCreate
from app.infrastructure.database import Base, SessionLocal, engine, init_db
from app.interfaces.deps import Repositories


class FakeHasher:
    """Reversible stand-in for bcrypt so tests stay fast."""

    def hash(self, plaintext: str) -> str:
        return "fake$" + plaintext[::-1]

    def verify(self, plaintext: str, digest: str) -> bool:
        return digest == self.hash(plaintext)


@pytest.fixture
def hasher():
    return FakeHasher()


@pytest.fixture
def db():
    init_db(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def repos(db):
    return Repositories(db)


@pytest.fixture
def user_service(repos):
    return UserService(repos.users, repos.roles, repos.users_roles)


@pytest.fixture
def role_service(repos):
    return RoleService(repos.roles, repos.users_roles, repos.roles_permission)


@pytest.fixture
def permission_service(repos):
    return PermissionService(repos.permissions, repos.roles_permission)


@pytest.fixture
def assignment_service(repos):
    return AssignmentService(
        repos.users, repos.roles, repos.permissions, repos.users_roles, repos.roles_permission
    )


@pytest.fixture
def credential_service(repos, hasher):
    return CredentialService(repos.credentials, repos.users, hasher)


@pytest.fixture
def session_service(repos):
    return SessionService(repos.sessions)


@pytest.fixture
def auth_service(repos, hasher, credential_service, session_service):
    return AuthenticationService(repos.credentials, repos.roles, credential_service, session_service, hasher)


@pytest.fixture
def category_service(repos):
    return CategoryService(repos.categories, repos.products)


@pytest.fixture
def product_service(repos):
    return ProductService(repos.products, repos.categories)


@pytest.fixture
def table_service(repos):
    return TableService(repos.tables, repos.orders)


@pytest.fixture
def status_service(repos):
    return StatusService(repos.statuses, repos.orders)


@pytest.fixture
def order_service(repos):
    return OrderService(repos.orders, repos.order_items, repos.users, repos.tables, repos.statuses)


@pytest.fixture
def order_item_service(repos):
    return OrderItemService(repos.order_items, repos.orders, repos.products)


@pytest.fixture
def waiter(user_service):
    return user_service.create(UserCreate(employee_id="EMP0100", first_name="Ana", last_name="Lopez"))


@pytest.fixture
def waiter_account(waiter, credential_service):
    return credential_service.create(
        CredentialCreate(user_id=waiter.id, username="ana.lopez", password="s3cretpass")
    )


@pytest.fixture
def statuses(status_service):
    from app.application.services.seed_service import STATUSES

    return {
        name: status_service.create(StatusCreate(name=name, description=description))
        for name, description in STATUSES.items()
    }


@pytest.fixture
def table(table_service):
    return table_service.create(TableCreate(table_number="12", capacity=4))


@pytest.fixture
def latte(category_service, product_service):
    beverages = category_service.create(CategoryCreate(name="Beverages", description="Hot and cold drinks"))
    return product_service.create(
        ProductCreate(
            category_id=beverages.id,
            name="Latte",
            price=Decimal("4.50"),
            description="Espresso with steamed milk",
        )
    )
