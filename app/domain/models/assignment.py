"""
Association models for users to roles and roles to permissions.

Rows exist only while both referenced records exist and are created/removed
exclusively by assignment operations.
"""

from typing import NamedTuple

from sqlalchemy import Column, ForeignKey, Index, Integer
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base, AUTH_SCHEMA
from app.domain.models.permission import Permission
from app.domain.models.role import Role
from app.domain.models.user import User


class AssignmentKey(NamedTuple):
    """Composite key of an association row; equality and hash cover both ids."""

    left_id: int
    right_id: int


class UsersRoles(Base):
    __tablename__ = "users_roles"
    __table_args__ = {"schema": AUTH_SCHEMA}

    users_id = Column(
        Integer,
        ForeignKey(f"{AUTH_SCHEMA}.users.id", name="fk_users_roles_users", ondelete="CASCADE"),
        primary_key=True,
    )
    roles_id = Column(
        Integer,
        ForeignKey(f"{AUTH_SCHEMA}.roles.id", name="fk_users_roles_roles", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    user = relationship(User, lazy="raise_on_sql")
    role = relationship(Role, lazy="raise_on_sql")

    @property
    def key(self) -> AssignmentKey:
        return AssignmentKey(self.users_id, self.roles_id)

    def __repr__(self):
        return f"<UsersRoles user={self.users_id} role={self.roles_id}>"


class RolesPermission(Base):
    __tablename__ = "roles_permission"
    __table_args__ = (
        Index("fk_roles_permission_permission_idx", "permission_id"),
        {"schema": AUTH_SCHEMA},
    )

    role_id = Column(
        Integer,
        ForeignKey(f"{AUTH_SCHEMA}.roles.id", name="fk_roles_permission_roles", ondelete="CASCADE"),
        primary_key=True,
    )
    permission_id = Column(
        Integer,
        ForeignKey(f"{AUTH_SCHEMA}.permission.id", name="fk_roles_permission_permission", ondelete="CASCADE"),
        primary_key=True,
    )

    role = relationship(Role, lazy="raise_on_sql")
    permission = relationship(Permission, lazy="raise_on_sql")

    @property
    def key(self) -> AssignmentKey:
        return AssignmentKey(self.role_id, self.permission_id)

    def __repr__(self):
        return f"<RolesPermission role={self.role_id} permission={self.permission_id}>"
