"""Login session, mapped to the 'auth.session' table."""

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.config import get_settings
from app.core import clock
from app.infrastructure.database import Base, AUTH_SCHEMA
from app.domain.models.user import User


class SessionState(str, Enum):
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"


class UserSession(Base):
    __tablename__ = "session"
    __table_args__ = {"schema": AUTH_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey(f"{AUTH_SCHEMA}.users.id", name="fk_session_users", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    access_token = Column(String(600), unique=True, nullable=False)
    refresh_token = Column(String(600), unique=True, nullable=False)
    access_token_expires_at = Column(DateTime, nullable=False)
    refresh_token_expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, nullable=False)
    last_activity_at = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=False)
    revoked_at = Column(DateTime, nullable=True)

    user = relationship(User, lazy="raise_on_sql")

    def initialize_timestamps(self, now: Optional[datetime] = None) -> None:
        """Fill any unset validity window and activity timestamps."""
        settings = get_settings()
        now = now or clock.now()
        if self.access_token_expires_at is None:
            self.access_token_expires_at = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        if self.refresh_token_expires_at is None:
            self.refresh_token_expires_at = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
        if self.created_at is None:
            self.created_at = now
        if self.last_activity_at is None:
            self.last_activity_at = now

    def is_expired_at(self, now: datetime) -> bool:
        return self.refresh_token_expires_at is not None and now > self.refresh_token_expires_at

    def state_at(self, now: datetime) -> SessionState:
        if self.revoked_at is not None:
            return SessionState.REVOKED
        if self.is_expired_at(now):
            return SessionState.EXPIRED
        if self.is_active:
            return SessionState.ACTIVE
        return SessionState.PENDING

    def is_usable_at(self, now: datetime) -> bool:
        return bool(self.is_active) and not self.is_expired_at(now)

    def __repr__(self):
        return f"<UserSession {self.id} user={self.user_id} active={self.is_active}>"


def token_preview(token: Optional[str]) -> str:
    """First and last four characters of a token, never the whole value."""
    if token is None or len(token) < 8:
        return "****"
    return f"{token[:4]}...{token[-4:]}"
