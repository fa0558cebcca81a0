"""
Auth Repository Interfaces.
Users, roles, permissions, their assignments, credentials and sessions.
"""

from datetime import datetime
from typing import List, Optional

from app.domain.models.assignment import AssignmentKey, RolesPermission, UsersRoles
from app.domain.models.credential import Credential
from app.domain.models.permission import Permission
from app.domain.models.role import Role
from app.domain.models.session import UserSession
from app.domain.models.user import User
from app.domain.repositories.base import BaseRepository
from app.domain.schemas.common import Page, PageRequest


class UserRepository(BaseRepository[User]):
    def find_by_employee_id(self, employee_id: str) -> Optional[User]:
        ...

    def exists_by_employee_id(self, employee_id: str) -> bool:
        ...

    def find_active(self, page: PageRequest) -> Page:
        ...

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        """Match first or last name."""
        ...

    def search_by_employee_id(self, term: str, page: PageRequest) -> Page:
        ...

    def count_active(self) -> int:
        ...


class RoleRepository(BaseRepository[Role]):
    def find_by_name(self, name: str) -> Optional[Role]:
        ...

    def exists_by_name(self, name: str) -> bool:
        ...

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        ...

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        ...

    def find_by_user(self, user_id: int) -> List[Role]:
        ...


class PermissionRepository(BaseRepository[Permission]):
    def find_by_name(self, name: str) -> Optional[Permission]:
        ...

    def exists_by_name(self, name: str) -> bool:
        ...

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        ...

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        ...

    def find_by_role(self, role_id: int) -> List[Permission]:
        ...

    def find_by_user(self, user_id: int) -> List[Permission]:
        """Distinct permissions reachable through the user's roles."""
        ...


class UsersRolesRepository(BaseRepository[UsersRoles]):
    def find_by_key(self, key: AssignmentKey) -> Optional[UsersRoles]:
        ...

    def exists_by_key(self, key: AssignmentKey) -> bool:
        ...

    def find_by_user(self, user_id: int) -> List[UsersRoles]:
        ...

    def find_by_role(self, role_id: int) -> List[UsersRoles]:
        ...

    def delete_by_user(self, user_id: int) -> int:
        ...

    def delete_by_role(self, role_id: int) -> int:
        ...

    def count_by_role(self, role_id: int) -> int:
        ...

    def search_by_role_name(self, term: str, page: PageRequest) -> Page:
        ...


class RolesPermissionRepository(BaseRepository[RolesPermission]):
    def find_by_key(self, key: AssignmentKey) -> Optional[RolesPermission]:
        ...

    def exists_by_key(self, key: AssignmentKey) -> bool:
        ...

    def find_by_role(self, role_id: int) -> List[RolesPermission]:
        ...

    def find_by_permission(self, permission_id: int) -> List[RolesPermission]:
        ...

    def delete_by_role(self, role_id: int) -> int:
        ...

    def delete_by_permission(self, permission_id: int) -> int:
        ...

    def count_by_role(self, role_id: int) -> int:
        ...

    def search_by_permission_name(self, term: str, page: PageRequest) -> Page:
        ...


class CredentialRepository(BaseRepository[Credential]):
    def find_by_username(self, username: str) -> Optional[Credential]:
        ...

    def exists_by_username(self, username: str) -> bool:
        ...

    def find_by_user_id(self, user_id: int) -> Optional[Credential]:
        ...

    def exists_by_user_id(self, user_id: int) -> bool:
        ...

    def find_by_employee_id(self, employee_id: str) -> Optional[Credential]:
        ...

    def search_by_username(self, term: str, page: PageRequest) -> Page:
        ...

    def find_locked(self, max_attempts: int) -> List[Credential]:
        ...

    def find_by_valid_recuperation_token(self, token: str, now: datetime) -> Optional[Credential]:
        ...

    def clear_expired_recuperation_tokens(self, now: datetime) -> int:
        ...

    def count_enabled(self) -> int:
        ...

    def count_locked(self, max_attempts: int) -> int:
        ...


class SessionRepository(BaseRepository[UserSession]):
    def find_by_access_token(self, token: str) -> Optional[UserSession]:
        ...

    def find_by_refresh_token(self, token: str) -> Optional[UserSession]:
        ...

    def find_valid_by_access_token(self, token: str, now: datetime) -> Optional[UserSession]:
        """Active, unrevoked and within its refresh window."""
        ...

    def find_active_by_user(self, user_id: int) -> List[UserSession]:
        """Oldest ``last_activity_at`` first."""
        ...

    def find_by_user(self, user_id: int, page: PageRequest) -> Page:
        ...

    def deactivate_by_user(self, user_id: int, now: datetime) -> int:
        ...

    def deactivate_expired(self, now: datetime) -> int:
        ...

    def delete_expired(self, now: datetime) -> int:
        ...

    def count_active(self, now: datetime) -> int:
        ...

    def count_expired(self, now: datetime) -> int:
        ...

    def count_created_since(self, since: datetime) -> int:
        ...
