import pytest
from pydantic import ValidationError

from app.core.exceptions import (
    BusinessRuleViolationException,
    DuplicateResourceException,
    EntityNotFoundException,
    InvalidRequestException,
)
from app.domain.schemas.auth import (
    PermissionCreate,
    RoleCreate,
    RolePermissionAssign,
    RoleUpdate,
    UserCreate,
    UserRoleAssign,
    UserUpdate,
)
from app.domain.schemas.common import PageRequest


def test_create_and_fetch_user(user_service):
    created = user_service.create(UserCreate(employee_id="EMP0200", first_name="Luis", last_name="Garcia"))
    fetched = user_service.get_by_employee_id("EMP0200")
    assert fetched.id == created.id
    assert fetched.full_name == "Luis Garcia"
    assert fetched.is_active is True


def test_employee_id_must_be_unique(user_service, waiter):
    with pytest.raises(DuplicateResourceException):
        user_service.create(UserCreate(employee_id=waiter.employee_id, first_name="Otra", last_name="Persona"))


def test_employee_id_must_have_seven_characters():
    with pytest.raises(ValidationError):
        UserCreate(employee_id="EMP1", first_name="Ana", last_name="Lopez")


def test_update_and_deactivate_user(user_service, waiter):
    updated = user_service.update(waiter.id, UserUpdate(last_name="Lopez Ruiz"))
    assert updated.full_name == "Ana Lopez Ruiz"

    user_service.deactivate(waiter.id)
    assert user_service.get(waiter.id).is_active is False
    assert user_service.count_active() == 0


def test_user_update_rejects_null_for_required_field(user_service, waiter):
    with pytest.raises(InvalidRequestException) as exc_info:
        user_service.update(waiter.id, UserUpdate.model_validate({"first_name": None}))
    assert exc_info.value.details == {"fields": ["first_name"]}
    assert user_service.get(waiter.id).first_name == "Ana"


def test_search_users_by_name(user_service, waiter):
    user_service.create(UserCreate(employee_id="EMP0201", first_name="Pedro", last_name="Sanchez"))
    page = user_service.search_by_name("lop", PageRequest())
    assert [u.employee_id for u in page.items] == [waiter.employee_id]


def test_missing_user_raises_not_found(user_service):
    with pytest.raises(EntityNotFoundException):
        user_service.get(999)


def test_role_names_are_unique(role_service):
    role_service.create(RoleCreate(name="admin", description="Administrators"))
    with pytest.raises(DuplicateResourceException):
        role_service.create(RoleCreate(name="admin", description="Second admin role"))


def test_role_names_compare_case_sensitively(role_service):
    role_service.create(RoleCreate(name="admin"))
    assert role_service.create(RoleCreate(name="ADMIN")).name == "ADMIN"


def test_role_name_length_is_validated():
    with pytest.raises(ValidationError):
        RoleCreate(name="abc")


def test_role_rename_conflict(role_service):
    role_service.create(RoleCreate(name="HOST"))
    cook = role_service.create(RoleCreate(name="COOK"))
    with pytest.raises(DuplicateResourceException):
        role_service.update(cook.id, RoleUpdate(name="HOST"))


def test_role_update_rejects_null_name(role_service):
    host = role_service.create(RoleCreate(name="HOST", description="Front of house"))
    with pytest.raises(InvalidRequestException):
        role_service.update(host.id, RoleUpdate.model_validate({"name": None}))
    assert role_service.get(host.id).name == "HOST"

    updated = role_service.update(host.id, RoleUpdate.model_validate({"description": None}))
    assert updated.name == "HOST"
    assert updated.description is None


def test_assigned_role_cannot_be_deleted(role_service, assignment_service, waiter):
    role = role_service.create(RoleCreate(name="HOST"))
    assignment_service.assign_role(UserRoleAssign(user_id=waiter.id, role_id=role.id))
    with pytest.raises(BusinessRuleViolationException):
        role_service.delete(role.id)

    assignment_service.revoke_role(waiter.id, role.id)
    role_service.delete(role.id)
    with pytest.raises(EntityNotFoundException):
        role_service.get(role.id)


def test_role_assignment_is_reflected_on_user(user_service, role_service, assignment_service, waiter):
    role = role_service.create(RoleCreate(name="HOST"))
    link = assignment_service.assign_role(UserRoleAssign(user_id=waiter.id, role_id=role.id))
    assert (link.user_id, link.role_id) == (waiter.id, role.id)
    assert link.role.name == "HOST"

    assert [r.name for r in user_service.get(waiter.id).roles] == ["HOST"]
    assert [link.user.employee_id for link in assignment_service.users_with_role(role.id)] == [waiter.employee_id]

    with pytest.raises(DuplicateResourceException):
        assignment_service.assign_role(UserRoleAssign(user_id=waiter.id, role_id=role.id))


def test_assigning_unknown_role_raises(assignment_service, waiter):
    with pytest.raises(EntityNotFoundException):
        assignment_service.assign_role(UserRoleAssign(user_id=waiter.id, role_id=404))


def test_effective_permissions_follow_roles(role_service, permission_service, assignment_service, waiter):
    host = role_service.create(RoleCreate(name="HOST"))
    read = permission_service.create(PermissionCreate(name="READ_PRODUCT"))
    create = permission_service.create(PermissionCreate(name="PERMISSION_ORDER_CREATE"))
    for permission in (read, create):
        assignment_service.grant_permission(RolePermissionAssign(role_id=host.id, permission_id=permission.id))

    assert not assignment_service.user_has_permission(waiter.id, "READ_PRODUCT")
    assignment_service.assign_role(UserRoleAssign(user_id=waiter.id, role_id=host.id))
    assert assignment_service.user_has_permission(waiter.id, "READ_PRODUCT")
    assert {p.name for p in assignment_service.permissions_of_user(waiter.id)} == {
        "READ_PRODUCT",
        "PERMISSION_ORDER_CREATE",
    }

    assignment_service.revoke_permission(host.id, read.id)
    assert not assignment_service.user_has_permission(waiter.id, "READ_PRODUCT")


def test_deleting_user_removes_role_links(user_service, role_service, assignment_service, waiter):
    role = role_service.create(RoleCreate(name="COOK"))
    assignment_service.assign_role(UserRoleAssign(user_id=waiter.id, role_id=role.id))
    user_service.delete(waiter.id)
    assert assignment_service.users_with_role(role.id) == []
