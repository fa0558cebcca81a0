"""Pydantic schemas for users, roles, permissions, credentials and sessions."""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from app.domain.models.credential import RECUPERATION_TOKEN_LENGTH
from app.domain.models.session import SessionState


# Users

class UserCreate(BaseModel):
    employee_id: str = Field(..., min_length=7, max_length=7)
    first_name: str = Field(..., min_length=2, max_length=150)
    last_name: str = Field(..., min_length=3, max_length=150)
    is_active: bool = True


class UserUpdate(BaseModel):
    employee_id: Optional[str] = Field(None, min_length=7, max_length=7)
    first_name: Optional[str] = Field(None, min_length=2, max_length=150)
    last_name: Optional[str] = Field(None, min_length=3, max_length=150)
    is_active: Optional[bool] = None


class RoleResponse(BaseModel):
    id: Optional[int] = None
    name: str
    description: Optional[str] = None


class UserResponse(BaseModel):
    id: Optional[int] = None
    employee_id: str
    first_name: str
    last_name: str
    full_name: str
    is_active: Optional[bool] = None
    roles: List[RoleResponse] = []


# Roles and permissions

class RoleCreate(BaseModel):
    name: str = Field(..., min_length=4, max_length=50)
    description: Optional[str] = Field(None, max_length=255)


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=4, max_length=50)
    description: Optional[str] = Field(None, max_length=255)


class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=4, max_length=100)
    description: Optional[str] = Field(None, max_length=255)


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=4, max_length=100)
    description: Optional[str] = Field(None, max_length=255)


class PermissionResponse(BaseModel):
    id: Optional[int] = None
    name: str
    description: Optional[str] = None


class UserRoleAssign(BaseModel):
    user_id: int
    role_id: int


class RolePermissionAssign(BaseModel):
    role_id: int
    permission_id: int


class UsersRolesResponse(BaseModel):
    user_id: int
    role_id: int
    user: Optional[UserResponse] = None
    role: Optional[RoleResponse] = None


class RolesPermissionResponse(BaseModel):
    role_id: int
    permission_id: int
    role: Optional[RoleResponse] = None
    permission: Optional[PermissionResponse] = None


# Credentials

class CredentialCreate(BaseModel):
    user_id: int
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)
    enabled: bool = True


class CredentialUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=3, max_length=100)
    enabled: Optional[bool] = None
    login_attempts: Optional[int] = Field(None, ge=0)


class CredentialResponse(BaseModel):
    id: Optional[int] = None
    user: Optional[UserResponse] = None
    username: str
    enabled: bool
    login_attempts: int = 0
    created_at: Optional[datetime] = None
    has_recuperation_token: bool = False
    recuperation_token_expiry: Optional[datetime] = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=72)


class RecoverPasswordRequest(BaseModel):
    token: str = Field(..., min_length=RECUPERATION_TOKEN_LENGTH, max_length=RECUPERATION_TOKEN_LENGTH)
    new_password: str = Field(..., min_length=8, max_length=72)


class CredentialStats(BaseModel):
    total_accounts: int
    enabled_accounts: int
    disabled_accounts: int
    locked_accounts: int


# Authentication and sessions

class LoginRequest(BaseModel):
    username: str
    password: str


class RefreshTokenRequest(BaseModel):
    refresh_token: str


class AuthenticationResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: datetime
    user: UserResponse


class SessionResponse(BaseModel):
    id: Optional[int] = None
    user: Optional[UserResponse] = None
    access_token_preview: str
    refresh_token_preview: str
    access_token_expires_at: datetime
    refresh_token_expires_at: datetime
    created_at: datetime
    last_activity_at: datetime
    is_active: bool
    is_expired: bool
    state: SessionState


class SessionStats(BaseModel):
    total_sessions: int
    active_sessions: int
    expired_sessions: int
    sessions_today: int
