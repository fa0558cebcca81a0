"""User service: staff records and their role listing."""

from typing import List

import structlog

from app.core.exceptions import DuplicateResourceException, EntityNotFoundException
from app.domain.mapping import role_mapper, user_mapper
from app.domain.models.user import User
from app.domain.repositories.auth import RoleRepository, UserRepository, UsersRolesRepository
from app.domain.schemas.auth import RoleResponse, UserCreate, UserResponse, UserUpdate
from app.domain.schemas.common import Page, PageRequest

logger = structlog.get_logger(__name__)


class UserService:
    def __init__(
        self,
        users: UserRepository,
        roles: RoleRepository,
        users_roles: UsersRolesRepository,
    ):
        self.users = users
        self.roles = roles
        self.users_roles = users_roles

    def create(self, request: UserCreate) -> UserResponse:
        if self.users.exists_by_employee_id(request.employee_id):
            raise DuplicateResourceException("User", "employee_id", request.employee_id)

        user = self.users.create(user_mapper.to_entity(request))
        logger.info("User created", user_id=user.id, employee_id=user.employee_id)
        return self.to_response(user)

    def get(self, user_id: int) -> UserResponse:
        return self.to_response(self.get_entity(user_id))

    def get_by_employee_id(self, employee_id: str) -> UserResponse:
        user = self.users.find_by_employee_id(employee_id)
        if user is None:
            raise EntityNotFoundException("User", "employee_id", employee_id)
        return self.to_response(user)

    def get_entity(self, user_id: int) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise EntityNotFoundException("User", "id", user_id)
        return user

    def update(self, user_id: int, request: UserUpdate) -> UserResponse:
        user = self.get_entity(user_id)
        if (
            request.employee_id is not None
            and request.employee_id != user.employee_id
            and self.users.exists_by_employee_id(request.employee_id)
        ):
            raise DuplicateResourceException("User", "employee_id", request.employee_id)

        user = self.users.update(user_mapper.apply_update(user, request))
        logger.info("User updated", user_id=user.id)
        return self.to_response(user)

    def delete(self, user_id: int) -> None:
        user = self.get_entity(user_id)
        self.users_roles.delete_by_user(user.id)
        self.users.delete(user)
        logger.info("User deleted", user_id=user_id)

    def set_active(self, user_id: int, active: bool) -> UserResponse:
        user = self.get_entity(user_id)
        user.is_active = active
        user = self.users.update(user)
        logger.info("User activation changed", user_id=user.id, is_active=active)
        return self.to_response(user)

    def activate(self, user_id: int) -> UserResponse:
        return self.set_active(user_id, True)

    def deactivate(self, user_id: int) -> UserResponse:
        return self.set_active(user_id, False)

    def list(self, page: PageRequest) -> Page:
        return self.users.list(page).map(self.to_response)

    def list_active(self, page: PageRequest) -> Page:
        return self.users.find_active(page).map(self.to_response)

    def search_by_name(self, term: str, page: PageRequest) -> Page:
        logger.debug("Searching users by name", term=term)
        return self.users.search_by_name(term, page).map(self.to_response)

    def search_by_employee_id(self, term: str, page: PageRequest) -> Page:
        return self.users.search_by_employee_id(term, page).map(self.to_response)

    def count_active(self) -> int:
        return self.users.count_active()

    def roles_of(self, user_id: int) -> List[RoleResponse]:
        return [role_mapper.to_response(role) for role in self.roles.find_by_user(user_id)]

    def to_response(self, user: User) -> UserResponse:
        return user_mapper.to_response(user, roles=self.roles_of(user.id))
