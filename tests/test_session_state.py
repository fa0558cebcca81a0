from datetime import datetime, timedelta

import pytest

from app.application.services.session_service import is_session_expired, is_session_usable, session_state
from app.domain.models.session import SessionState, UserSession, token_preview

NOW = datetime(2024, 5, 1, 12, 0, 0)


def make_session(*, active=True, refresh_in=timedelta(hours=1), revoked=False):
    return UserSession(
        user_id=1,
        access_token="access-token-value",
        refresh_token="refresh-token-value",
        access_token_expires_at=NOW + timedelta(minutes=30),
        refresh_token_expires_at=NOW + refresh_in,
        created_at=NOW - timedelta(minutes=5),
        last_activity_at=NOW,
        is_active=active,
        revoked_at=NOW if revoked else None,
    )


@pytest.mark.parametrize(
    "active, refresh_in, revoked, expected",
    [
        (True, timedelta(hours=1), False, SessionState.ACTIVE),
        (False, timedelta(hours=1), False, SessionState.PENDING),
        (True, timedelta(seconds=-1), False, SessionState.EXPIRED),
        (False, timedelta(seconds=-1), False, SessionState.EXPIRED),
        (True, timedelta(hours=1), True, SessionState.REVOKED),
        (False, timedelta(seconds=-1), True, SessionState.REVOKED),
    ],
)
def test_state_truth_table(active, refresh_in, revoked, expected):
    session = make_session(active=active, refresh_in=refresh_in, revoked=revoked)
    assert session_state(session, NOW) is expected


def test_active_flag_does_not_rescue_an_expired_session():
    session = make_session(active=True, refresh_in=timedelta(seconds=-1))
    assert is_session_expired(session, NOW)
    assert not is_session_usable(session, NOW)


def test_expiry_boundary_is_exclusive():
    session = make_session(refresh_in=timedelta(0))
    assert not is_session_expired(session, NOW)
    assert is_session_usable(session, NOW)


def test_pending_session_is_not_usable():
    assert not is_session_usable(make_session(active=False), NOW)


def test_initialize_timestamps_fills_only_missing_values():
    session = UserSession(user_id=1, access_token="a" * 20, refresh_token="r" * 20, is_active=True)
    session.initialize_timestamps(NOW)
    assert session.created_at == NOW
    assert session.last_activity_at == NOW
    assert session.access_token_expires_at == NOW + timedelta(minutes=30)
    assert session.refresh_token_expires_at == NOW + timedelta(days=1)

    later = NOW + timedelta(hours=2)
    session.initialize_timestamps(later)
    assert session.created_at == NOW


@pytest.mark.parametrize(
    "token, preview",
    [
        ("abcdefghijklmnop", "abcd...mnop"),
        ("12345678", "1234...5678"),
        ("short", "****"),
        (None, "****"),
    ],
)
def test_token_preview(token, preview):
    assert token_preview(token) == preview
