"""
Credential service: login accounts, lockout counters and password recovery.

Password digests come from the injected ``PasswordHasher``; plaintext
passwords and recuperation tokens are never logged.
"""

from datetime import timedelta
from typing import List, Optional

import structlog

from app.application.services.token_generator import TokenGenerator
from app.config import get_settings
from app.core import clock
from app.core.exceptions import (
    DuplicateResourceException,
    EntityNotFoundException,
    InvalidRequestException,
    InvalidTokenException,
    UnauthorizedException,
)
from app.core.security import PasswordHasher
from app.domain.mapping import credential_mapper
from app.domain.models.credential import Credential
from app.domain.repositories.auth import CredentialRepository, UserRepository
from app.domain.schemas.auth import (
    ChangePasswordRequest,
    CredentialCreate,
    CredentialResponse,
    CredentialStats,
    CredentialUpdate,
    RecoverPasswordRequest,
)
from app.domain.schemas.common import Page, PageRequest

settings = get_settings()
logger = structlog.get_logger(__name__)


class CredentialService:
    def __init__(
        self,
        credentials: CredentialRepository,
        users: UserRepository,
        hasher: PasswordHasher,
        token_generator: Optional[TokenGenerator] = None,
    ):
        self.credentials = credentials
        self.users = users
        self.hasher = hasher
        self.token_generator = token_generator or TokenGenerator()

    def create(self, request: CredentialCreate) -> CredentialResponse:
        user = self.users.get_by_id(request.user_id)
        if user is None:
            raise EntityNotFoundException("User", "id", request.user_id)
        if self.credentials.exists_by_user_id(user.id):
            raise DuplicateResourceException("Credential", "user_id", user.id)
        if self.credentials.exists_by_username(request.username):
            raise DuplicateResourceException("Credential", "username", request.username)

        credential = credential_mapper.to_entity(
            request,
            user=user,
            password_hash=self.hasher.hash(request.password),
            login_attempts=0,
        )
        credential = self.credentials.create(credential)
        logger.info("Credential created", credential_id=credential.id, username=credential.username)
        return credential_mapper.to_response(credential)

    def get(self, credential_id: int) -> CredentialResponse:
        return credential_mapper.to_response(self.get_entity(credential_id))

    def get_by_username(self, username: str) -> CredentialResponse:
        credential = self.credentials.find_by_username(username)
        if credential is None:
            raise EntityNotFoundException("Credential", "username", username)
        return credential_mapper.to_response(credential)

    def get_by_user_id(self, user_id: int) -> CredentialResponse:
        credential = self.credentials.find_by_user_id(user_id)
        if credential is None:
            raise EntityNotFoundException("Credential", "user_id", user_id)
        return credential_mapper.to_response(credential)

    def get_by_employee_id(self, employee_id: str) -> CredentialResponse:
        credential = self.credentials.find_by_employee_id(employee_id)
        if credential is None:
            raise EntityNotFoundException("Credential", "employee_id", employee_id)
        return credential_mapper.to_response(credential)

    def get_entity(self, credential_id: int) -> Credential:
        credential = self.credentials.get_by_id(credential_id)
        if credential is None:
            raise EntityNotFoundException("Credential", "id", credential_id)
        return credential

    def update(self, credential_id: int, request: CredentialUpdate) -> CredentialResponse:
        credential = self.get_entity(credential_id)
        if (
            request.username is not None
            and request.username != credential.username
            and self.credentials.exists_by_username(request.username)
        ):
            raise DuplicateResourceException("Credential", "username", request.username)

        credential = self.credentials.update(credential_mapper.apply_update(credential, request))
        logger.info("Credential updated", credential_id=credential.id)
        return credential_mapper.to_response(credential)

    def delete(self, credential_id: int) -> None:
        self.credentials.delete(self.get_entity(credential_id))
        logger.info("Credential deleted", credential_id=credential_id)

    def list(self, page: PageRequest) -> Page:
        return self.credentials.list(page).map(credential_mapper.to_response)

    def search_by_username(self, term: str, page: PageRequest) -> Page:
        return self.credentials.search_by_username(term, page).map(credential_mapper.to_response)

    def is_username_available(self, username: str) -> bool:
        return not self.credentials.exists_by_username(username)

    # Passwords

    def change_password(self, credential_id: int, request: ChangePasswordRequest) -> None:
        credential = self.get_entity(credential_id)
        if not self.hasher.verify(request.current_password, credential.password_hash):
            logger.warning("Password change rejected", credential_id=credential.id)
            raise UnauthorizedException("Current password is incorrect")
        if request.current_password == request.new_password:
            raise InvalidRequestException("New password must differ from the current one")

        credential.password_hash = self.hasher.hash(request.new_password)
        self.credentials.update(credential)
        logger.info("Password changed", credential_id=credential.id)

    def reset_password(self, credential_id: int, new_password: str) -> None:
        """Administrative reset: sets the password and clears lockout state."""
        credential = self.get_entity(credential_id)
        credential.password_hash = self.hasher.hash(new_password)
        credential.login_attempts = 0
        credential.recuperation_tkn = None
        credential.recuperation_tkn_exp = None
        self.credentials.update(credential)
        logger.info("Password reset", credential_id=credential.id)

    # Lockout

    def is_account_locked(self, credential: Credential) -> bool:
        if not credential.enabled:
            return True
        if credential.login_attempts >= settings.MAX_LOGIN_ATTEMPTS:
            return True
        user = credential.user
        return user is not None and not user.is_active

    def increment_login_attempts(self, credential: Credential) -> Credential:
        credential.login_attempts = (credential.login_attempts or 0) + 1
        credential = self.credentials.update(credential)
        if credential.login_attempts >= settings.MAX_LOGIN_ATTEMPTS:
            logger.warning(
                "Account locked after failed attempts",
                username=credential.username,
                attempts=credential.login_attempts,
            )
        return credential

    def reset_login_attempts(self, credential: Credential) -> Credential:
        if credential.login_attempts:
            credential.login_attempts = 0
            credential = self.credentials.update(credential)
        return credential

    def unlock(self, credential_id: int) -> CredentialResponse:
        credential = self.get_entity(credential_id)
        credential.login_attempts = 0
        credential.enabled = True
        credential = self.credentials.update(credential)
        logger.info("Account unlocked", credential_id=credential.id)
        return credential_mapper.to_response(credential)

    def set_enabled(self, credential_id: int, enabled: bool) -> CredentialResponse:
        credential = self.get_entity(credential_id)
        credential.enabled = enabled
        credential = self.credentials.update(credential)
        logger.info("Account enabled flag changed", credential_id=credential.id, enabled=enabled)
        return credential_mapper.to_response(credential)

    def enable(self, credential_id: int) -> CredentialResponse:
        return self.set_enabled(credential_id, True)

    def disable(self, credential_id: int) -> CredentialResponse:
        return self.set_enabled(credential_id, False)

    def locked_accounts(self) -> List[CredentialResponse]:
        return [
            credential_mapper.to_response(c)
            for c in self.credentials.find_locked(settings.MAX_LOGIN_ATTEMPTS)
        ]

    # Recuperation tokens

    def issue_recuperation_token(self, username: str) -> str:
        """Store a fresh recovery code on the account and return it for delivery."""
        credential = self.credentials.find_by_username(username)
        if credential is None:
            raise EntityNotFoundException("Credential", "username", username)

        token = self.token_generator.generate_recuperation_token()
        credential.recuperation_tkn = token
        credential.recuperation_tkn_exp = clock.now() + timedelta(hours=settings.RECUPERATION_TOKEN_EXPIRE_HOURS)
        self.credentials.update(credential)
        logger.info("Recuperation token issued", credential_id=credential.id)
        return token

    def validate_recuperation_token(self, token: str) -> bool:
        return self.credentials.find_by_valid_recuperation_token(token, clock.now()) is not None

    def recover_password(self, request: RecoverPasswordRequest) -> None:
        credential = self.credentials.find_by_valid_recuperation_token(request.token, clock.now())
        if credential is None:
            raise InvalidTokenException("Invalid or expired recuperation token")

        credential.password_hash = self.hasher.hash(request.new_password)
        credential.recuperation_tkn = None
        credential.recuperation_tkn_exp = None
        credential.login_attempts = 0
        self.credentials.update(credential)
        logger.info("Password recovered with token", credential_id=credential.id)

    def clean_expired_recuperation_tokens(self) -> int:
        cleared = self.credentials.clear_expired_recuperation_tokens(clock.now())
        if cleared:
            logger.info("Expired recuperation tokens cleared", count=cleared)
        return cleared

    def stats(self) -> CredentialStats:
        total = self.credentials.count()
        enabled = self.credentials.count_enabled()
        return CredentialStats(
            total_accounts=total,
            enabled_accounts=enabled,
            disabled_accounts=total - enabled,
            locked_accounts=self.credentials.count_locked(settings.MAX_LOGIN_ATTEMPTS),
        )
