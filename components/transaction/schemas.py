"""Pydantic schemas for transaction data validation."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from components.core.schemas import PositiveMoney
from components.transaction.models import TransactionType


class TransactionBase(BaseModel):
    """Base transaction schema."""
    title: str = Field(..., min_length=1, max_length=200)
    amount: PositiveMoney
    type: TransactionType
    category_id: int
    account_id: int
    date: date
    description: Optional[str] = None


class TransactionCreate(TransactionBase):
    """Schema for transaction creation."""
    pass


class TransactionUpdate(TransactionBase):
    """Schema for transaction update; replaces every editable field."""
    pass


class Transaction(TransactionBase):
    """Schema for transaction response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: Decimal
    created_at: datetime
