"""Order status catalog, mapped to the 'orders.status' table."""

from sqlalchemy import Column, Integer, String

from app.infrastructure.database import Base, ORDERS_SCHEMA


class Status(Base):
    __tablename__ = "status"
    __table_args__ = {"schema": ORDERS_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(20), unique=True, nullable=False)
    description = Column(String(100), nullable=False)

    def __repr__(self):
        return f"<Status {self.name}>"
