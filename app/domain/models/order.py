"""Order domain model, mapped to the 'orders.orders' table."""

from decimal import Decimal

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, Numeric
from sqlalchemy.orm import relationship

from app.core import clock
from app.infrastructure.database import Base, AUTH_SCHEMA, ORDERS_SCHEMA, TABLES_SCHEMA
from app.domain.models.status import Status
from app.domain.models.table import Table
from app.domain.models.user import User

# Seeded status names, in lifecycle order, and the timestamp each one stamps
STATUS_CONFIRMED = "Confirmed"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"
STATUS_PAID = "Paid"
STATUS_CANCELED = "Canceled"

LIFECYCLE_TIMESTAMPS = {
    STATUS_CONFIRMED: "confirmed_at",
    STATUS_IN_PROGRESS: "in_progress_at",
    STATUS_COMPLETED: "completed_at",
    STATUS_PAID: "paid_at",
    STATUS_CANCELED: "canceled_at",
}
TERMINAL_STATUSES = (STATUS_PAID, STATUS_CANCELED)


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        Index("orders_created_at_idx", "created_at"),
        {"schema": ORDERS_SCHEMA},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey(f"{AUTH_SCHEMA}.users.id", name="fk_orders_users"),
        nullable=False,
        index=True,
    )
    table_id = Column(
        Integer,
        ForeignKey(f"{TABLES_SCHEMA}.tables.id", name="fk_orders_tables"),
        nullable=False,
        index=True,
    )
    status_id = Column(
        Integer,
        ForeignKey(f"{ORDERS_SCHEMA}.status.id", name="fk_orders_status"),
        nullable=False,
        index=True,
    )
    is_takeaway = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=clock.now)
    updated_at = Column(DateTime, nullable=True, default=clock.now, onupdate=clock.now)
    confirmed_at = Column(DateTime, nullable=False, default=clock.now)
    in_progress_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    canceled_at = Column(DateTime, nullable=True)

    total_amount = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    notes = Column(String(250), nullable=True)

    user = relationship(User, lazy="raise_on_sql")
    table = relationship(Table, lazy="raise_on_sql")
    status = relationship(Status, lazy="raise_on_sql")

    def __repr__(self):
        return f"<Order {self.id} total={self.total_amount}>"
