"""
Assignment service.

The only place rows of ``users_roles`` and ``roles_permission`` are created
or removed. Both sides must exist before a link is written.
"""

from typing import List

import structlog

from app.core.exceptions import DuplicateResourceException, EntityNotFoundException
from app.domain.mapping import permission_mapper, roles_permission_mapper, users_roles_mapper
from app.domain.models.assignment import AssignmentKey, RolesPermission, UsersRoles
from app.domain.repositories.auth import (
    PermissionRepository,
    RoleRepository,
    RolesPermissionRepository,
    UserRepository,
    UsersRolesRepository,
)
from app.domain.schemas.auth import (
    PermissionResponse,
    RolePermissionAssign,
    RolesPermissionResponse,
    UserRoleAssign,
    UsersRolesResponse,
)
from app.domain.schemas.common import Page, PageRequest

logger = structlog.get_logger(__name__)


class AssignmentService:
    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        permissions: PermissionRepository,
        users_roles: UsersRolesRepository,
        roles_permission: RolesPermissionRepository,
    ):
        self.users = users
        self.roles = roles
        self.permissions = permissions
        self.users_roles = users_roles
        self.roles_permission = roles_permission

    # Users <-> roles

    def assign_role(self, request: UserRoleAssign) -> UsersRolesResponse:
        user = self.users.get_by_id(request.user_id)
        if user is None:
            raise EntityNotFoundException("User", "id", request.user_id)
        role = self.roles.get_by_id(request.role_id)
        if role is None:
            raise EntityNotFoundException("Role", "id", request.role_id)

        key = AssignmentKey(user.id, role.id)
        if self.users_roles.exists_by_key(key):
            raise DuplicateResourceException("UsersRoles", "key", key)

        link = self.users_roles.create(UsersRoles(users_id=user.id, roles_id=role.id, user=user, role=role))
        logger.info("Role assigned", user_id=user.id, role=role.name)
        return users_roles_mapper.to_response(link)

    def revoke_role(self, user_id: int, role_id: int) -> None:
        key = AssignmentKey(user_id, role_id)
        link = self.users_roles.find_by_key(key)
        if link is None:
            raise EntityNotFoundException("UsersRoles", "key", key)
        self.users_roles.delete(link)
        logger.info("Role revoked", user_id=user_id, role_id=role_id)

    def roles_of_user(self, user_id: int) -> List[UsersRolesResponse]:
        return [users_roles_mapper.to_response(link) for link in self.users_roles.find_by_user(user_id)]

    def users_with_role(self, role_id: int) -> List[UsersRolesResponse]:
        return [users_roles_mapper.to_response(link) for link in self.users_roles.find_by_role(role_id)]

    def search_user_roles(self, role_name: str, page: PageRequest) -> Page:
        return self.users_roles.search_by_role_name(role_name, page).map(users_roles_mapper.to_response)

    # Roles <-> permissions

    def grant_permission(self, request: RolePermissionAssign) -> RolesPermissionResponse:
        role = self.roles.get_by_id(request.role_id)
        if role is None:
            raise EntityNotFoundException("Role", "id", request.role_id)
        permission = self.permissions.get_by_id(request.permission_id)
        if permission is None:
            raise EntityNotFoundException("Permission", "id", request.permission_id)

        key = AssignmentKey(role.id, permission.id)
        if self.roles_permission.exists_by_key(key):
            raise DuplicateResourceException("RolesPermission", "key", key)

        link = self.roles_permission.create(
            RolesPermission(role_id=role.id, permission_id=permission.id, role=role, permission=permission)
        )
        logger.info("Permission granted", role=role.name, permission=permission.name)
        return roles_permission_mapper.to_response(link)

    def revoke_permission(self, role_id: int, permission_id: int) -> None:
        key = AssignmentKey(role_id, permission_id)
        link = self.roles_permission.find_by_key(key)
        if link is None:
            raise EntityNotFoundException("RolesPermission", "key", key)
        self.roles_permission.delete(link)
        logger.info("Permission revoked", role_id=role_id, permission_id=permission_id)

    def permissions_of_role(self, role_id: int) -> List[RolesPermissionResponse]:
        return [
            roles_permission_mapper.to_response(link)
            for link in self.roles_permission.find_by_role(role_id)
        ]

    def search_role_permissions(self, permission_name: str, page: PageRequest) -> Page:
        return self.roles_permission.search_by_permission_name(permission_name, page).map(
            roles_permission_mapper.to_response
        )

    # Effective permissions

    def permissions_of_user(self, user_id: int) -> List[PermissionResponse]:
        return [permission_mapper.to_response(p) for p in self.permissions.find_by_user(user_id)]

    def user_has_permission(self, user_id: int, permission_name: str) -> bool:
        return any(p.name == permission_name for p in self.permissions.find_by_user(user_id))
