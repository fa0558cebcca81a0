"""Role domain model, mapped to the 'auth.roles' table."""

from sqlalchemy import Column, Integer, String, UniqueConstraint

from app.infrastructure.database import Base, AUTH_SCHEMA


class Role(Base):
    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("name", name="roles_name_UNIQUE"),
        {"schema": AUTH_SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False)
    description = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<Role {self.name}>"
