"""Pydantic schemas for dining tables."""

from pydantic import BaseModel, Field
from typing import Literal, Optional

TableStatus = Literal["free", "occupied", "reserved"]


class TableCreate(BaseModel):
    table_number: str = Field(..., min_length=1, max_length=10)
    capacity: int = Field(..., ge=0)
    is_active: bool = True
    status: TableStatus = "free"


class TableUpdate(BaseModel):
    table_number: Optional[str] = Field(None, min_length=1, max_length=10)
    capacity: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    status: Optional[TableStatus] = None


class TableResponse(BaseModel):
    id: Optional[int] = None
    table_number: str
    capacity: int
    is_active: Optional[bool] = None
    status: str
