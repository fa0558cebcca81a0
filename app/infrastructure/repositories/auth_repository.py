"""
SQLAlchemy Implementation of the Auth Repositories.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, update
from sqlalchemy.orm import joinedload

from app.domain.models.assignment import AssignmentKey, RolesPermission, UsersRoles
from app.domain.models.credential import Credential
from app.domain.models.permission import Permission
from app.domain.models.role import Role
from app.domain.models.session import UserSession
from app.domain.models.user import User
from app.domain.repositories.auth import (
    CredentialRepository,
    PermissionRepository,
    RoleRepository,
    RolesPermissionRepository,
    SessionRepository,
    UserRepository,
    UsersRolesRepository,
)
from app.domain.schemas.common import Page, PageRequest
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    resource_name = "User"

    def find_by_employee_id(self, employee_id: str) -> Optional[User]:
        return self.find_one_by(User.employee_id, employee_id)

    def exists_by_employee_id(self, employee_id: str) -> bool:
        return self.exists_by(User.employee_id, employee_id)

    def find_active(self, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(User.is_active.is_(True)), page)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.search(term, User.first_name, User.last_name, page=page)

    def search_by_employee_id(self, term: str, page: PageRequest) -> Page:
        return self.search(term, User.employee_id, page=page)

    def count_active(self) -> int:
        return self.db.query(User).filter(User.is_active.is_(True)).count()


class SQLAlchemyRoleRepository(SQLAlchemyRepository[Role], RoleRepository):
    resource_name = "Role"

    def find_by_name(self, name: str) -> Optional[Role]:
        return self.find_one_by(Role.name, name)

    def exists_by_name(self, name: str) -> bool:
        return self.exists_by(Role.name, name)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Role.name, page=page)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Role.description, page=page)

    def find_by_user(self, user_id: int) -> List[Role]:
        return (
            self.db.query(Role)
            .join(UsersRoles, UsersRoles.roles_id == Role.id)
            .filter(UsersRoles.users_id == user_id)
            .order_by(Role.name)
            .all()
        )


class SQLAlchemyPermissionRepository(SQLAlchemyRepository[Permission], PermissionRepository):
    resource_name = "Permission"

    def find_by_name(self, name: str) -> Optional[Permission]:
        return self.find_one_by(Permission.name, name)

    def exists_by_name(self, name: str) -> bool:
        return self.exists_by(Permission.name, name)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Permission.name, page=page)

    def search_by_description(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Permission.description, page=page)

    def find_by_role(self, role_id: int) -> List[Permission]:
        return (
            self.db.query(Permission)
            .join(RolesPermission, RolesPermission.permission_id == Permission.id)
            .filter(RolesPermission.role_id == role_id)
            .order_by(Permission.name)
            .all()
        )

    def find_by_user(self, user_id: int) -> List[Permission]:
        return (
            self.db.query(Permission)
            .join(RolesPermission, RolesPermission.permission_id == Permission.id)
            .join(UsersRoles, UsersRoles.roles_id == RolesPermission.role_id)
            .filter(UsersRoles.users_id == user_id)
            .distinct()
            .order_by(Permission.name)
            .all()
        )


class SQLAlchemyUsersRolesRepository(SQLAlchemyRepository[UsersRoles], UsersRolesRepository):
    resource_name = "UsersRoles"
    load_options = (joinedload(UsersRoles.user), joinedload(UsersRoles.role))

    def get_by_id(self, id: AssignmentKey) -> Optional[UsersRoles]:
        return self.find_by_key(id)

    def find_by_key(self, key: AssignmentKey) -> Optional[UsersRoles]:
        return (
            self._query()
            .filter(UsersRoles.users_id == key.left_id, UsersRoles.roles_id == key.right_id)
            .first()
        )

    def exists_by_key(self, key: AssignmentKey) -> bool:
        query = self.db.query(UsersRoles).filter(
            UsersRoles.users_id == key.left_id, UsersRoles.roles_id == key.right_id
        )
        return self.db.query(query.exists()).scalar()

    def find_by_user(self, user_id: int) -> List[UsersRoles]:
        return self._query().filter(UsersRoles.users_id == user_id).order_by(UsersRoles.roles_id).all()

    def find_by_role(self, role_id: int) -> List[UsersRoles]:
        return self._query().filter(UsersRoles.roles_id == role_id).order_by(UsersRoles.users_id).all()

    def delete_by_user(self, user_id: int) -> int:
        deleted = self.db.query(UsersRoles).filter(UsersRoles.users_id == user_id).delete(synchronize_session=False)
        self._commit()
        return deleted

    def delete_by_role(self, role_id: int) -> int:
        deleted = self.db.query(UsersRoles).filter(UsersRoles.roles_id == role_id).delete(synchronize_session=False)
        self._commit()
        return deleted

    def count_by_role(self, role_id: int) -> int:
        return self.db.query(UsersRoles).filter(UsersRoles.roles_id == role_id).count()

    def search_by_role_name(self, term: str, page: PageRequest) -> Page:
        query = self._query().join(Role, Role.id == UsersRoles.roles_id).filter(Role.name.ilike(f"%{term}%"))
        return self._paginate(query, page)


class SQLAlchemyRolesPermissionRepository(SQLAlchemyRepository[RolesPermission], RolesPermissionRepository):
    resource_name = "RolesPermission"
    load_options = (joinedload(RolesPermission.role), joinedload(RolesPermission.permission))

    def get_by_id(self, id: AssignmentKey) -> Optional[RolesPermission]:
        return self.find_by_key(id)

    def find_by_key(self, key: AssignmentKey) -> Optional[RolesPermission]:
        return (
            self._query()
            .filter(RolesPermission.role_id == key.left_id, RolesPermission.permission_id == key.right_id)
            .first()
        )

    def exists_by_key(self, key: AssignmentKey) -> bool:
        query = self.db.query(RolesPermission).filter(
            RolesPermission.role_id == key.left_id, RolesPermission.permission_id == key.right_id
        )
        return self.db.query(query.exists()).scalar()

    def find_by_role(self, role_id: int) -> List[RolesPermission]:
        return (
            self._query()
            .filter(RolesPermission.role_id == role_id)
            .order_by(RolesPermission.permission_id)
            .all()
        )

    def find_by_permission(self, permission_id: int) -> List[RolesPermission]:
        return (
            self._query()
            .filter(RolesPermission.permission_id == permission_id)
            .order_by(RolesPermission.role_id)
            .all()
        )

    def delete_by_role(self, role_id: int) -> int:
        deleted = (
            self.db.query(RolesPermission)
            .filter(RolesPermission.role_id == role_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted

    def delete_by_permission(self, permission_id: int) -> int:
        deleted = (
            self.db.query(RolesPermission)
            .filter(RolesPermission.permission_id == permission_id)
            .delete(synchronize_session=False)
        )
        self._commit()
        return deleted

    def count_by_role(self, role_id: int) -> int:
        return self.db.query(RolesPermission).filter(RolesPermission.role_id == role_id).count()

    def search_by_permission_name(self, term: str, page: PageRequest) -> Page:
        query = (
            self._query()
            .join(Permission, Permission.id == RolesPermission.permission_id)
            .filter(Permission.name.ilike(f"%{term}%"))
        )
        return self._paginate(query, page)


class SQLAlchemyCredentialRepository(SQLAlchemyRepository[Credential], CredentialRepository):
    resource_name = "Credential"
    load_options = (joinedload(Credential.user),)

    def find_by_username(self, username: str) -> Optional[Credential]:
        return self.find_one_by(Credential.username, username)

    def exists_by_username(self, username: str) -> bool:
        return self.exists_by(Credential.username, username)

    def find_by_user_id(self, user_id: int) -> Optional[Credential]:
        return self.find_one_by(Credential.user_id, user_id)

    def exists_by_user_id(self, user_id: int) -> bool:
        return self.exists_by(Credential.user_id, user_id)

    def find_by_employee_id(self, employee_id: str) -> Optional[Credential]:
        return (
            self._query()
            .join(User, User.id == Credential.user_id)
            .filter(User.employee_id == employee_id)
            .first()
        )

    def search_by_username(self, term: str, page: PageRequest) -> Page:
        return self.search(term, Credential.username, page=page)

    def find_locked(self, max_attempts: int) -> List[Credential]:
        return (
            self._query()
            .filter(Credential.login_attempts >= max_attempts)
            .order_by(Credential.username)
            .all()
        )

    def find_by_valid_recuperation_token(self, token: str, now: datetime) -> Optional[Credential]:
        return (
            self._query()
            .filter(
                Credential.recuperation_tkn == token,
                Credential.recuperation_tkn_exp.isnot(None),
                Credential.recuperation_tkn_exp > now,
            )
            .first()
        )

    def clear_expired_recuperation_tokens(self, now: datetime) -> int:
        cleared = self.db.execute(
            update(Credential)
            .where(Credential.recuperation_tkn_exp.isnot(None), Credential.recuperation_tkn_exp <= now)
            .values(recuperation_tkn=None, recuperation_tkn_exp=None)
            .execution_options(synchronize_session="fetch")
        ).rowcount
        self._commit()
        return cleared

    def count_enabled(self) -> int:
        return self.db.query(Credential).filter(Credential.enabled.is_(True)).count()

    def count_locked(self, max_attempts: int) -> int:
        return self.db.query(Credential).filter(Credential.login_attempts >= max_attempts).count()


class SQLAlchemySessionRepository(SQLAlchemyRepository[UserSession], SessionRepository):
    resource_name = "Session"
    load_options = (joinedload(UserSession.user),)

    def _order_by(self):
        return [UserSession.created_at.desc(), UserSession.id.desc()]

    def find_by_access_token(self, token: str) -> Optional[UserSession]:
        return self.find_one_by(UserSession.access_token, token)

    def find_by_refresh_token(self, token: str) -> Optional[UserSession]:
        return self.find_one_by(UserSession.refresh_token, token)

    def find_valid_by_access_token(self, token: str, now: datetime) -> Optional[UserSession]:
        return (
            self._query()
            .filter(
                UserSession.access_token == token,
                UserSession.is_active.is_(True),
                UserSession.revoked_at.is_(None),
                UserSession.refresh_token_expires_at >= now,
            )
            .first()
        )

    def find_active_by_user(self, user_id: int) -> List[UserSession]:
        return (
            self._query()
            .filter(UserSession.user_id == user_id, UserSession.is_active.is_(True))
            .order_by(UserSession.last_activity_at.asc(), UserSession.id.asc())
            .all()
        )

    def find_by_user(self, user_id: int, page: PageRequest) -> Page:
        return self._paginate(self._query().filter(UserSession.user_id == user_id), page)

    def deactivate_by_user(self, user_id: int, now: datetime) -> int:
        updated = self.db.execute(
            update(UserSession)
            .where(UserSession.user_id == user_id, UserSession.is_active.is_(True))
            .values(is_active=False, revoked_at=now)
            .execution_options(synchronize_session="fetch")
        ).rowcount
        self._commit()
        return updated

    def deactivate_expired(self, now: datetime) -> int:
        updated = self.db.execute(
            update(UserSession)
            .where(UserSession.is_active.is_(True), UserSession.refresh_token_expires_at < now)
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        ).rowcount
        self._commit()
        return updated

    def delete_expired(self, now: datetime) -> int:
        deleted = (
            self.db.query(UserSession)
            .filter(UserSession.refresh_token_expires_at < now)
            .delete(synchronize_session="fetch")
        )
        self._commit()
        return deleted

    def count_active(self, now: datetime) -> int:
        return (
            self.db.query(UserSession)
            .filter(
                and_(UserSession.is_active.is_(True), UserSession.refresh_token_expires_at >= now)
            )
            .count()
        )

    def count_expired(self, now: datetime) -> int:
        return (
            self.db.query(UserSession)
            .filter(UserSession.refresh_token_expires_at < now)
            .count()
        )

    def count_created_since(self, since: datetime) -> int:
        return self.db.query(UserSession).filter(UserSession.created_at >= since).count()
