"""Pydantic schemas for bill data validation."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from components.bill.models import BillStatus, BillType
from components.core.schemas import PositiveMoney


class BillBase(BaseModel):
    """Base bill schema."""
    type: BillType
    description: str = Field(..., min_length=1, max_length=255)
    category_id: int
    amount: PositiveMoney
    due_date: date
    is_recurring: bool = False


class BillCreate(BillBase):
    """Schema for bill creation."""
    status: BillStatus = BillStatus.PENDING


class BillUpdate(BaseModel):
    """Schema for bill update."""
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    category_id: Optional[int] = None
    amount: Optional[PositiveMoney] = None
    due_date: Optional[date] = None
    status: Optional[BillStatus] = None
    is_recurring: Optional[bool] = None


class Bill(BillBase):
    """Schema for bill response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: Decimal
    status: BillStatus
    created_at: datetime
