"""Dining table, mapped to the 'tables.tables' table."""

from sqlalchemy import Column, Integer, String, Boolean

from app.infrastructure.database import Base, TABLES_SCHEMA

TABLE_STATUS_FREE = "free"
TABLE_STATUS_OCCUPIED = "occupied"
TABLE_STATUS_RESERVED = "reserved"
TABLE_STATUSES = (TABLE_STATUS_FREE, TABLE_STATUS_OCCUPIED, TABLE_STATUS_RESERVED)


class Table(Base):
    __tablename__ = "tables"
    __table_args__ = {"schema": TABLES_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    table_number = Column(String(10), unique=True, nullable=False)
    capacity = Column(Integer, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    status = Column(String(10), nullable=False, default=TABLE_STATUS_FREE)

    def __repr__(self):
        return f"<Table {self.table_number} ({self.status})>"
