"""Role and permission catalogs."""

import structlog

from app.core.exceptions import (
    BusinessRuleViolationException,
    DuplicateResourceException,
    EntityNotFoundException,
)
from app.domain.mapping import permission_mapper, role_mapper
from app.domain.models.permission import Permission
from app.domain.models.role import Role
from app.domain.repositories.auth import (
    PermissionRepository,
    RoleRepository,
    RolesPermissionRepository,
    UsersRolesRepository,
)
from app.domain.schemas.auth import (
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    RoleCreate,
    RoleResponse,
    RoleUpdate,
)
from app.domain.schemas.common import Page, PageRequest

logger = structlog.get_logger(__name__)


class RoleService:
    def __init__(
        self,
        roles: RoleRepository,
        users_roles: UsersRolesRepository,
        roles_permission: RolesPermissionRepository,
    ):
        self.roles = roles
        self.users_roles = users_roles
        self.roles_permission = roles_permission

    def create(self, request: RoleCreate) -> RoleResponse:
        # Names are compared exactly: "admin" and "ADMIN" are different roles
        if self.roles.exists_by_name(request.name):
            raise DuplicateResourceException("Role", "name", request.name)

        role = self.roles.create(role_mapper.to_entity(request))
        logger.info("Role created", role_id=role.id, name=role.name)
        return role_mapper.to_response(role)

    def get(self, role_id: int) -> RoleResponse:
        return role_mapper.to_response(self.get_entity(role_id))

    def get_by_name(self, name: str) -> RoleResponse:
        role = self.roles.find_by_name(name)
        if role is None:
            raise EntityNotFoundException("Role", "name", name)
        return role_mapper.to_response(role)

    def get_entity(self, role_id: int) -> Role:
        role = self.roles.get_by_id(role_id)
        if role is None:
            raise EntityNotFoundException("Role", "id", role_id)
        return role

    def update(self, role_id: int, request: RoleUpdate) -> RoleResponse:
        role = self.get_entity(role_id)
        if request.name is not None and request.name != role.name and self.roles.exists_by_name(request.name):
            raise DuplicateResourceException("Role", "name", request.name)

        role = self.roles.update(role_mapper.apply_update(role, request))
        logger.info("Role updated", role_id=role.id)
        return role_mapper.to_response(role)

    def delete(self, role_id: int) -> None:
        role = self.get_entity(role_id)
        assigned = self.users_roles.count_by_role(role.id)
        if assigned:
            raise BusinessRuleViolationException(
                f"Role '{role.name}' is assigned to {assigned} user(s)",
                details={"role_id": role.id, "assigned_users": assigned},
            )
        removed = self.roles_permission.delete_by_role(role.id)
        self.roles.delete(role)
        logger.info("Role deleted", role_id=role_id, permission_links_removed=removed)

    def list(self, page: PageRequest) -> Page:
        return self.roles.list(page).map(role_mapper.to_response)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.roles.search_by_name(term, page).map(role_mapper.to_response)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.roles.search_by_description(term, page).map(role_mapper.to_response)

    def count(self) -> int:
        return self.roles.count()


class PermissionService:
    def __init__(self, permissions: PermissionRepository, roles_permission: RolesPermissionRepository):
        self.permissions = permissions
        self.roles_permission = roles_permission

    def create(self, request: PermissionCreate) -> PermissionResponse:
        if self.permissions.exists_by_name(request.name):
            raise DuplicateResourceException("Permission", "name", request.name)

        permission = self.permissions.create(permission_mapper.to_entity(request))
        logger.info("Permission created", permission_id=permission.id, name=permission.name)
        return permission_mapper.to_response(permission)

    def get(self, permission_id: int) -> PermissionResponse:
        return permission_mapper.to_response(self.get_entity(permission_id))

    def get_by_name(self, name: str) -> PermissionResponse:
        permission = self.permissions.find_by_name(name)
        if permission is None:
            raise EntityNotFoundException("Permission", "name", name)
        return permission_mapper.to_response(permission)

    def get_entity(self, permission_id: int) -> Permission:
        permission = self.permissions.get_by_id(permission_id)
        if permission is None:
            raise EntityNotFoundException("Permission", "id", permission_id)
        return permission

    def update(self, permission_id: int, request: PermissionUpdate) -> PermissionResponse:
        permission = self.get_entity(permission_id)
        if (
            request.name is not None
            and request.name != permission.name
            and self.permissions.exists_by_name(request.name)
        ):
            raise DuplicateResourceException("Permission", "name", request.name)

        permission = self.permissions.update(permission_mapper.apply_update(permission, request))
        logger.info("Permission updated", permission_id=permission.id)
        return permission_mapper.to_response(permission)

    def delete(self, permission_id: int) -> None:
        permission = self.get_entity(permission_id)
        removed = self.roles_permission.delete_by_permission(permission.id)
        self.permissions.delete(permission)
        logger.info("Permission deleted", permission_id=permission_id, role_links_removed=removed)

    def list(self, page: PageRequest) -> Page:
        return self.permissions.list(page).map(permission_mapper.to_response)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.permissions.search_by_name(term, page).map(permission_mapper.to_response)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.permissions.search_by_description(term, page).map(permission_mapper.to_response)

    def count(self) -> int:
        return self.permissions.count()
