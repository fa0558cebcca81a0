"""
Authentication service: login, token refresh, logout and request guards.

Order of checks on login: unknown username, then lockout, then password.
A locked account is reported as ``AccountLockedException`` before the
password is looked at, so a correct password never reveals anything about
a locked account.
"""

from typing import Optional

import structlog

from app.application.services import jwt_service
from app.application.services.credential_service import CredentialService
from app.application.services.session_service import SessionService, is_session_usable
from app.config import get_settings
from app.core.exceptions import AccountLockedException, InvalidTokenException, UnauthorizedException
from app.core.security import PasswordHasher
from app.domain.mapping import role_mapper, user_mapper
from app.domain.models.session import UserSession, token_preview
from app.domain.models.user import User
from app.domain.repositories.auth import CredentialRepository, RoleRepository
from app.domain.schemas.auth import AuthenticationResponse, UserResponse

settings = get_settings()
logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


class AuthenticationService:
    def __init__(
        self,
        credentials: CredentialRepository,
        roles: RoleRepository,
        credential_service: CredentialService,
        session_service: SessionService,
        hasher: PasswordHasher,
    ):
        self.credentials = credentials
        self.roles = roles
        self.credential_service = credential_service
        self.session_service = session_service
        self.hasher = hasher

    def login(self, username: str, password: str) -> AuthenticationResponse:
        credential = self.credentials.find_by_username(username)
        if credential is None:
            logger.warning("Login failed: unknown username", username=username)
            raise UnauthorizedException(INVALID_CREDENTIALS)

        if self.credential_service.is_account_locked(credential):
            logger.warning("Login refused: account locked", username=username)
            raise AccountLockedException()

        if not self.hasher.verify(password, credential.password_hash):
            credential = self.credential_service.increment_login_attempts(credential)
            logger.warning("Login failed: bad password", username=username, attempts=credential.login_attempts)
            raise UnauthorizedException(INVALID_CREDENTIALS)

        self.credential_service.reset_login_attempts(credential)
        user = credential.user
        access_token, refresh_token = self._issue_tokens(user, credential.username)
        session = self.session_service.create(user, access_token, refresh_token)
        logger.info("Login succeeded", username=username, session_id=session.id)
        return self._build_response(session, user)

    def refresh(self, refresh_token: str) -> AuthenticationResponse:
        payload = jwt_service.decode_token(refresh_token, jwt_service.REFRESH_TOKEN_TYPE)
        if payload is None:
            raise InvalidTokenException()

        session = self.session_service.find_by_refresh_token(refresh_token)
        if session is None or not is_session_usable(session) or session.revoked_at is not None:
            logger.warning("Refresh rejected", refresh_token=token_preview(refresh_token))
            raise InvalidTokenException()

        credential = self.credentials.find_by_user_id(session.user_id)
        if credential is None or self.credential_service.is_account_locked(credential):
            raise AccountLockedException()

        user = session.user
        access_token, new_refresh_token = self._issue_tokens(user, credential.username)
        session = self.session_service.renew(session, access_token, new_refresh_token)
        return self._build_response(session, user)

    def logout(self, access_token: str) -> None:
        self.session_service.revoke_by_access_token(access_token)
        logger.info("Logout", access_token=token_preview(access_token))

    def logout_everywhere(self, user_id: int) -> int:
        return self.session_service.revoke_all_for_user(user_id)

    def authenticate(self, access_token: str) -> UserResponse:
        """Resolve the user behind an access token for a request guard."""
        payload = jwt_service.decode_token(access_token, jwt_service.ACCESS_TOKEN_TYPE)
        if payload is None:
            raise InvalidTokenException()

        session = self.session_service.require_usable(access_token)
        user: Optional[User] = session.user
        if user is None or not user.is_active:
            raise InvalidTokenException()

        self.session_service.touch(session)
        return self._user_response(user)

    def _issue_tokens(self, user: User, username: str):
        claims = {"sub": username, "uid": user.id}
        return jwt_service.create_access_token(claims), jwt_service.create_refresh_token(claims)

    def _build_response(self, session: UserSession, user: User) -> AuthenticationResponse:
        return AuthenticationResponse(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            expires_at=session.access_token_expires_at,
            user=self._user_response(user),
        )

    def _user_response(self, user: User) -> UserResponse:
        roles = [role_mapper.to_response(role) for role in self.roles.find_by_user(user.id)]
        return user_mapper.to_response(user, roles=roles)
