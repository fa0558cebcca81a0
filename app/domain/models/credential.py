"""Credential domain model: the login account of a user ('auth.auth' table)."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.core import clock
from app.infrastructure.database import Base, AUTH_SCHEMA
from app.domain.models.user import User

RECUPERATION_TOKEN_LENGTH = 10


class Credential(Base):
    __tablename__ = "auth"
    __table_args__ = {"schema": AUTH_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey(f"{AUTH_SCHEMA}.users.id", name="fk_auth_users", ondelete="CASCADE"),
        unique=True,
        nullable=False,
        index=True,
    )
    username = Column(String(100), unique=True, nullable=False, index=True)
    password_hash = Column(String(150), nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    recuperation_tkn = Column(String(RECUPERATION_TOKEN_LENGTH), nullable=True)
    recuperation_tkn_exp = Column(DateTime, nullable=True)
    login_attempts = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=clock.now)

    user = relationship(User, lazy="raise_on_sql")

    def __repr__(self):
        return f"<Credential {self.username}>"
