from datetime import timedelta

import pytest
from pydantic import ValidationError

from app.core import clock
from app.core.exceptions import (
    DuplicateResourceException,
    EntityNotFoundException,
    InvalidRequestException,
    InvalidTokenException,
    UnauthorizedException,
)
from app.domain.schemas.auth import (
    ChangePasswordRequest,
    CredentialCreate,
    CredentialUpdate,
    RecoverPasswordRequest,
    UserCreate,
)


def test_password_is_stored_hashed(repos, waiter_account, hasher):
    credential = repos.credentials.find_by_username("ana.lopez")
    assert credential.password_hash != "s3cretpass"
    assert hasher.verify("s3cretpass", credential.password_hash)


def test_response_exposes_no_secrets(waiter_account):
    dumped = waiter_account.model_dump()
    assert "password_hash" not in dumped
    assert "recuperation_tkn" not in dumped
    assert dumped["has_recuperation_token"] is False
    assert dumped["user"]["employee_id"] == "EMP0100"


def test_one_account_per_user(credential_service, waiter, waiter_account):
    with pytest.raises(DuplicateResourceException):
        credential_service.create(CredentialCreate(user_id=waiter.id, username="ana2", password="another-pass"))


def test_usernames_are_unique(credential_service, user_service, waiter_account):
    other = user_service.create(UserCreate(employee_id="EMP0101", first_name="Rosa", last_name="Martin"))
    with pytest.raises(DuplicateResourceException):
        credential_service.create(CredentialCreate(user_id=other.id, username="ana.lopez", password="another-pass"))
    assert not credential_service.is_username_available("ana.lopez")
    assert credential_service.is_username_available("rosa.martin")


def test_account_requires_existing_user(credential_service):
    with pytest.raises(EntityNotFoundException):
        credential_service.create(CredentialCreate(user_id=77, username="ghost", password="whatever1"))


def test_short_password_is_rejected():
    with pytest.raises(ValidationError):
        CredentialCreate(user_id=1, username="ana", password="short")


def test_lookup_by_employee_id(credential_service, waiter_account):
    assert credential_service.get_by_employee_id("EMP0100").username == "ana.lopez"


def test_update_username(credential_service, waiter_account):
    updated = credential_service.update(waiter_account.id, CredentialUpdate(username="ana.l"))
    assert updated.username == "ana.l"


def test_change_password(credential_service, repos, hasher, waiter_account):
    with pytest.raises(UnauthorizedException):
        credential_service.change_password(
            waiter_account.id, ChangePasswordRequest(current_password="wrong", new_password="newpassword1")
        )
    with pytest.raises(InvalidRequestException):
        credential_service.change_password(
            waiter_account.id, ChangePasswordRequest(current_password="s3cretpass", new_password="s3cretpass")
        )

    credential_service.change_password(
        waiter_account.id, ChangePasswordRequest(current_password="s3cretpass", new_password="newpassword1")
    )
    assert hasher.verify("newpassword1", repos.credentials.get_by_id(waiter_account.id).password_hash)


def test_recover_password_with_token(credential_service, repos, hasher, waiter_account):
    token = credential_service.issue_recuperation_token("ana.lopez")
    assert len(token) == 10
    assert credential_service.validate_recuperation_token(token)
    assert credential_service.get(waiter_account.id).has_recuperation_token is True

    credential_service.recover_password(RecoverPasswordRequest(token=token, new_password="recovered1"))

    credential = repos.credentials.get_by_id(waiter_account.id)
    assert hasher.verify("recovered1", credential.password_hash)
    assert credential.recuperation_tkn is None
    # Tokens are single use
    assert not credential_service.validate_recuperation_token(token)


def test_expired_token_is_refused_and_cleaned(credential_service, repos, waiter_account):
    token = credential_service.issue_recuperation_token("ana.lopez")
    credential = repos.credentials.get_by_id(waiter_account.id)
    credential.recuperation_tkn_exp = clock.now() - timedelta(minutes=1)
    repos.credentials.update(credential)

    assert not credential_service.validate_recuperation_token(token)
    with pytest.raises(InvalidTokenException):
        credential_service.recover_password(RecoverPasswordRequest(token=token, new_password="recovered1"))

    assert credential_service.clean_expired_recuperation_tokens() == 1
    assert credential_service.get(waiter_account.id).has_recuperation_token is False


def test_reset_password_clears_lockout(credential_service, repos, hasher, waiter_account):
    credential = repos.credentials.get_by_id(waiter_account.id)
    credential.login_attempts = 5
    repos.credentials.update(credential)

    credential_service.reset_password(waiter_account.id, "brandnew12")
    assert credential_service.get(waiter_account.id).login_attempts == 0


def test_stats(credential_service, user_service, waiter_account):
    other = user_service.create(UserCreate(employee_id="EMP0101", first_name="Rosa", last_name="Martin"))
    created = credential_service.create(
        CredentialCreate(user_id=other.id, username="rosa", password="password99")
    )
    credential_service.disable(created.id)

    stats = credential_service.stats()
    assert stats.total_accounts == 2
    assert stats.enabled_accounts == 1
    assert stats.disabled_accounts == 1
    assert stats.locked_accounts == 0
