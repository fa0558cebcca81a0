"""Auth API routes: login, refresh, logout, me, sessions."""

from typing import List

from fastapi import APIRouter, Depends, status

from app.application.services.authentication_service import AuthenticationService
from app.application.services.session_service import SessionService
from app.domain.schemas.auth import (
    AuthenticationResponse,
    LoginRequest,
    RefreshTokenRequest,
    SessionResponse,
    UserResponse,
)
from app.interfaces.api.deps import get_access_token, get_current_user, require_permission
from app.interfaces.deps import get_authentication_service, get_session_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=AuthenticationResponse)
def login(body: LoginRequest, auth: AuthenticationService = Depends(get_authentication_service)):
    return auth.login(body.username, body.password)


@router.post("/refresh", response_model=AuthenticationResponse)
def refresh(body: RefreshTokenRequest, auth: AuthenticationService = Depends(get_authentication_service)):
    return auth.refresh(body.refresh_token)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    token: str = Depends(get_access_token),
    auth: AuthenticationService = Depends(get_authentication_service),
):
    auth.logout(token)


@router.get("/me", response_model=UserResponse)
def get_me(user: UserResponse = Depends(get_current_user)):
    return user


@router.get("/sessions", response_model=List[SessionResponse])
def my_sessions(
    user: UserResponse = Depends(get_current_user),
    sessions: SessionService = Depends(get_session_service),
):
    return sessions.list_active_for_user(user.id)


@router.post("/users/{user_id}/logout-all")
def logout_user_everywhere(
    user_id: int,
    _: UserResponse = Depends(require_permission("PERMISSION_USER_ACCOUNT_CONTROL")),
    auth: AuthenticationService = Depends(get_authentication_service),
):
    return {"user_id": user_id, "revoked_sessions": auth.logout_everywhere(user_id)}
