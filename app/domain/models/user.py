"""User domain model, mapped to the 'auth.users' table."""

from sqlalchemy import Column, Integer, String, Boolean

from app.infrastructure.database import Base, AUTH_SCHEMA


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"schema": AUTH_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    employee_id = Column(String(7), unique=True, nullable=False, index=True)
    first_name = Column(String(150), nullable=False)
    last_name = Column(String(150), nullable=False)
    is_active = Column(Boolean, default=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<User {self.employee_id} - {self.full_name}>"
