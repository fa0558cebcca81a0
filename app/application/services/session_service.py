"""
Session service.

Session state is derived at read time from the stored flags and the current
clock:

    revoked_at set            -> REVOKED
    now > refresh expiry      -> EXPIRED (whatever ``is_active`` says)
    is_active                 -> ACTIVE
    otherwise                 -> PENDING

Only ACTIVE sessions are usable; an ``is_active`` row past its refresh expiry
is stale and must be rejected.
"""

from datetime import datetime
from typing import List, Optional

import structlog

from app.config import get_settings
from app.core import clock
from app.core.exceptions import EntityNotFoundException, InvalidTokenException
from app.domain.mapping import session_mapper
from app.domain.models.session import SessionState, UserSession, token_preview
from app.domain.models.user import User
from app.domain.repositories.auth import SessionRepository
from app.domain.schemas.auth import SessionResponse, SessionStats
from app.domain.schemas.common import Page, PageRequest

settings = get_settings()
logger = structlog.get_logger(__name__)


def is_session_expired(session: UserSession, now: Optional[datetime] = None) -> bool:
    return session.is_expired_at(now or clock.now())


def session_state(session: UserSession, now: Optional[datetime] = None) -> SessionState:
    return session.state_at(now or clock.now())


def is_session_usable(session: UserSession, now: Optional[datetime] = None) -> bool:
    return session.is_usable_at(now or clock.now())


class SessionService:
    def __init__(self, sessions: SessionRepository):
        self.sessions = sessions

    token_preview = staticmethod(token_preview)
    is_session_expired = staticmethod(is_session_expired)
    session_state = staticmethod(session_state)
    is_session_usable = staticmethod(is_session_usable)

    def create(self, user: User, access_token: str, refresh_token: str) -> UserSession:
        """Open an ACTIVE session, revoking the least recently used ones over the limit."""
        now = clock.now()
        self.enforce_session_limit(user.id, now)

        session = UserSession(
            user_id=user.id,
            user=user,
            access_token=access_token,
            refresh_token=refresh_token,
            is_active=True,
        )
        session.initialize_timestamps(now)
        session = self.sessions.create(session)
        logger.info(
            "Session created",
            session_id=session.id,
            user_id=user.id,
            access_token=token_preview(access_token),
        )
        return session

    def enforce_session_limit(self, user_id: int, now: datetime) -> int:
        active = self.sessions.find_active_by_user(user_id)
        overflow = len(active) - settings.MAX_ACTIVE_SESSIONS + 1
        revoked = 0
        for session in active[:max(overflow, 0)]:
            self._revoke(session, now)
            self.sessions.update(session)
            revoked += 1
        if revoked:
            logger.info("Oldest sessions revoked over limit", user_id=user_id, count=revoked)
        return revoked

    def renew(self, session: UserSession, access_token: str, refresh_token: str) -> UserSession:
        """Rotate both tokens and restart the validity windows."""
        now = clock.now()
        session.access_token = access_token
        session.refresh_token = refresh_token
        session.access_token_expires_at = None
        session.refresh_token_expires_at = None
        session.last_activity_at = None
        session.initialize_timestamps(now)
        session = self.sessions.update(session)
        logger.info("Session renewed", session_id=session.id, access_token=token_preview(access_token))
        return session

    def touch(self, session: UserSession) -> UserSession:
        session.last_activity_at = clock.now()
        return self.sessions.update(session)

    def get(self, session_id: int) -> SessionResponse:
        return self.to_response(self.get_entity(session_id))

    def get_entity(self, session_id: int) -> UserSession:
        session = self.sessions.get_by_id(session_id)
        if session is None:
            raise EntityNotFoundException("Session", "id", session_id)
        return session

    def find_by_access_token(self, token: str) -> Optional[UserSession]:
        return self.sessions.find_by_access_token(token)

    def find_by_refresh_token(self, token: str) -> Optional[UserSession]:
        return self.sessions.find_by_refresh_token(token)

    def is_session_valid(self, access_token: str) -> bool:
        return self.sessions.find_valid_by_access_token(access_token, clock.now()) is not None

    def require_usable(self, access_token: str) -> UserSession:
        session = self.sessions.find_by_access_token(access_token)
        if session is None:
            raise InvalidTokenException()
        state = session_state(session)
        if state is not SessionState.ACTIVE:
            logger.warning("Session rejected", session_id=session.id, state=state.value)
            raise InvalidTokenException()
        return session

    def revoke(self, session_id: int) -> SessionResponse:
        session = self.get_entity(session_id)
        self._revoke(session, clock.now())
        session = self.sessions.update(session)
        logger.info("Session revoked", session_id=session.id, user_id=session.user_id)
        return self.to_response(session)

    def revoke_by_access_token(self, access_token: str) -> None:
        session = self.sessions.find_by_access_token(access_token)
        if session is None:
            raise InvalidTokenException()
        self._revoke(session, clock.now())
        self.sessions.update(session)
        logger.info("Session revoked", session_id=session.id, user_id=session.user_id)

    def revoke_all_for_user(self, user_id: int) -> int:
        count = self.sessions.deactivate_by_user(user_id, clock.now())
        logger.info("All sessions revoked for user", user_id=user_id, count=count)
        return count

    def list_active_for_user(self, user_id: int) -> List[SessionResponse]:
        return [self.to_response(s) for s in self.sessions.find_active_by_user(user_id)]

    def list_for_user(self, user_id: int, page: PageRequest) -> Page:
        return self.sessions.find_by_user(user_id, page).map(self.to_response)

    def list(self, page: PageRequest) -> Page:
        return self.sessions.list(page).map(self.to_response)

    def mark_expired_inactive(self) -> int:
        count = self.sessions.deactivate_expired(clock.now())
        if count:
            logger.info("Expired sessions deactivated", count=count)
        return count

    def delete_expired(self) -> int:
        count = self.sessions.delete_expired(clock.now())
        if count:
            logger.info("Expired sessions deleted", count=count)
        return count

    def stats(self) -> SessionStats:
        now = clock.now()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        return SessionStats(
            total_sessions=self.sessions.count(),
            active_sessions=self.sessions.count_active(now),
            expired_sessions=self.sessions.count_expired(now),
            sessions_today=self.sessions.count_created_since(start_of_day),
        )

    def to_response(self, session: UserSession) -> SessionResponse:
        now = clock.now()
        return session_mapper.to_response(
            session,
            is_expired=session.is_expired_at(now),
            state=session.state_at(now),
        )

    @staticmethod
    def _revoke(session: UserSession, now: datetime) -> None:
        session.is_active = False
        if session.revoked_at is None:
            session.revoked_at = now