"""Pydantic schemas for orders, order items and order statuses."""

from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from app.domain.schemas.auth import UserResponse
from app.domain.schemas.product import ProductResponse
from app.domain.schemas.table import TableResponse


class StatusCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=20)
    description: str = Field(..., min_length=1, max_length=100)


class StatusUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=20)
    description: Optional[str] = Field(None, min_length=1, max_length=100)


class StatusResponse(BaseModel):
    id: Optional[int] = None
    name: str
    description: str


class OrderCreate(BaseModel):
    user_id: int
    table_id: int
    status_id: int
    is_takeaway: bool = False
    notes: Optional[str] = Field(None, max_length=250)


class OrderUpdate(BaseModel):
    table_id: Optional[int] = None
    is_takeaway: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=250)


class OrderStatusChange(BaseModel):
    status_id: int


class OrderResponse(BaseModel):
    id: Optional[int] = None
    user: Optional[UserResponse] = None
    table: Optional[TableResponse] = None
    status: Optional[StatusResponse] = None
    is_takeaway: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    in_progress_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
    total_amount: Decimal = Decimal("0.00")
    notes: Optional[str] = None


class OrderStats(BaseModel):
    total_orders: int
    orders_by_status: Dict[str, int]
    total_revenue: Decimal
    orders_today: int


class OrderItemCreate(BaseModel):
    order_id: int
    product_id: int
    quantity: int = Field(..., ge=1)
    unit_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    special_instructions: Optional[str] = Field(None, max_length=250)


class OrderItemUpdate(BaseModel):
    quantity: Optional[int] = Field(None, ge=1)
    unit_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    special_instructions: Optional[str] = Field(None, max_length=250)


class OrderItemResponse(BaseModel):
    id: Optional[int] = None
    order_id: int
    product: Optional[ProductResponse] = None
    quantity: int
    unit_price: Decimal
    subtotal: Decimal
    special_instructions: Optional[str] = None


class OrderTotalInconsistency(BaseModel):
    order_id: int
    stored_total: Decimal
    calculated_total: Decimal
