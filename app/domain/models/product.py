"""Product domain model, mapped to the 'product.product' table."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from app.core import clock
from app.infrastructure.database import Base, PRODUCT_SCHEMA
from app.domain.models.category import Category


class Product(Base):
    __tablename__ = "product"
    __table_args__ = {"schema": PRODUCT_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(
        Integer,
        ForeignKey(f"{PRODUCT_SCHEMA}.category.id", name="fk_product_category"),
        nullable=False,
        index=True,
    )
    name = Column(String(50), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    description = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=clock.now)
    updated_at = Column(DateTime, nullable=False, default=clock.now, onupdate=clock.now)

    category = relationship(Category, lazy="raise_on_sql")

    def __repr__(self):
        return f"<Product {self.name} - {self.price}>"
