"""FastAPI dependency: bearer token guard backed by stored sessions."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.services.assignment_service import AssignmentService
from app.application.services.authentication_service import AuthenticationService
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.domain.schemas.auth import UserResponse
from app.interfaces.deps import get_assignment_service, get_authentication_service

security = HTTPBearer(auto_error=False)


def get_access_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedException("Missing bearer token")
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_access_token),
    auth: AuthenticationService = Depends(get_authentication_service),
) -> UserResponse:
    """Resolve the user of a usable session; stale, revoked or unknown tokens are rejected."""
    return auth.authenticate(token)


def require_permission(permission_name: str):
    def checker(
        user: UserResponse = Depends(get_current_user),
        assignments: AssignmentService = Depends(get_assignment_service),
    ) -> UserResponse:
        if not assignments.user_has_permission(user.id, permission_name):
            raise ForbiddenException(f"Missing permission {permission_name}")
        return user

    return checker
