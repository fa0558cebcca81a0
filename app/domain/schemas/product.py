"""Pydantic schemas for the product catalog (categories and products)."""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=150)
    is_active: bool = True


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, min_length=1, max_length=150)
    is_active: Optional[bool] = None


class CategoryResponse(BaseModel):
    id: Optional[int] = None
    name: str
    description: str
    is_active: Optional[bool] = None


class ProductCreate(BaseModel):
    category_id: int
    name: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    is_active: bool = True
    description: str = Field(..., min_length=1, max_length=100)


class ProductUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None
    description: Optional[str] = Field(None, min_length=1, max_length=100)


class ProductResponse(BaseModel):
    id: Optional[int] = None
    category: Optional[CategoryResponse] = None
    name: str
    price: Decimal
    is_active: Optional[bool] = None
    description: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductStats(BaseModel):
    total_products: int
    active_products: int
    average_price: Decimal
    min_price: Decimal
    max_price: Decimal
