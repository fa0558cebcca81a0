"""Product category, mapped to the 'product.category' table."""

from sqlalchemy import Column, Integer, String, Boolean

from app.infrastructure.database import Base, PRODUCT_SCHEMA


class Category(Base):
    __tablename__ = "category"
    __table_args__ = {"schema": PRODUCT_SCHEMA}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(150), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<Category {self.name}>"
