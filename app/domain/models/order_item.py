"""Order line, mapped to the 'orders.order_item' table."""

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, event
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base, ORDERS_SCHEMA, PRODUCT_SCHEMA
from app.domain.models.order import Order
from app.domain.models.product import Product


class OrderItem(Base):
    __tablename__ = "order_item"
    __table_args__ = {"schema": ORDERS_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(
        Integer,
        ForeignKey(f"{ORDERS_SCHEMA}.orders.id", name="fk_order_item_orders", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    product_id = Column(
        Integer,
        ForeignKey(f"{PRODUCT_SCHEMA}.product.id", name="fk_order_item_products"),
        nullable=False,
        index=True,
    )
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    subtotal = Column(Numeric(10, 2), nullable=False)
    special_instructions = Column(String(250), nullable=True)

    order = relationship(Order, lazy="raise_on_sql")
    product = relationship(Product, lazy="raise_on_sql")

    def calculate_subtotal(self) -> None:
        if self.quantity is not None and self.unit_price is not None:
            self.subtotal = self.unit_price * self.quantity

    def __repr__(self):
        return f"<OrderItem {self.id} {self.quantity} x {self.unit_price}>"


@event.listens_for(OrderItem, "before_insert")
@event.listens_for(OrderItem, "before_update")
def _recalculate_subtotal(mapper, connection, target: OrderItem) -> None:
    target.calculate_subtotal()
