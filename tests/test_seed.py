from app.application.services.seed_service import CATALOG, ROLE_PERMISSIONS, STATUSES, TABLES, USERS
from app.interfaces.deps import get_seed_service


def test_seed_creates_default_data(db, repos, hasher):
    get_seed_service(db, hasher).run()

    assert {s.name for s in repos.statuses.list_all()} == set(STATUSES)
    assert repos.tables.count() == len(TABLES)
    assert repos.categories.count() == len(CATALOG)
    assert repos.products.count() == sum(len(items) for items in CATALOG.values())
    assert repos.credentials.count() == len(USERS)

    admin = repos.credentials.find_by_username("admin_user")
    assert hasher.verify("password123", admin.password_hash)
    assert [r.name for r in repos.roles.find_by_user(admin.user_id)] == ["ADMIN"]

    cook = repos.credentials.find_by_username("cook_user")
    cook_permissions = {p.name for p in repos.permissions.find_by_user(cook.user_id)}
    assert cook_permissions == set(ROLE_PERMISSIONS["COOK"])


def test_seed_is_idempotent(db, repos, hasher):
    seeder = get_seed_service(db, hasher)
    seeder.run()
    counts = (repos.roles.count(), repos.permissions.count(), repos.users.count(), repos.products.count())

    seeder.run()
    assert (repos.roles.count(), repos.permissions.count(), repos.users.count(), repos.products.count()) == counts
    assert repos.users_roles.count() == len(USERS)


def test_takeaway_table_has_no_seats(db, repos, hasher):
    get_seed_service(db, hasher).run()
    assert repos.tables.find_by_table_number("0").capacity == 0
