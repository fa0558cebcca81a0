"""Permission domain model, mapped to the 'auth.permission' table."""

from sqlalchemy import Column, Integer, String, UniqueConstraint

from app.infrastructure.database import Base, AUTH_SCHEMA


class Permission(Base):
    __tablename__ = "permission"
    __table_args__ = (
        UniqueConstraint("name", name="permission_name_UNIQUE"),
        {"schema": AUTH_SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<Permission {self.name}>"
