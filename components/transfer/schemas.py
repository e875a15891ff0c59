"""Pydantic schemas for transfer data validation."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from components.core.schemas import PositiveMoney


class TransferCreate(BaseModel):
    """Schema for transfer creation."""
    source_account_id: int
    destination_account_id: int
    amount: PositiveMoney
    description: Optional[str] = None
    date: date


class Transfer(BaseModel):
    """Schema for transfer response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    source_account_id: int
    destination_account_id: int
    amount: Decimal
    description: Optional[str] = None
    date: date
    created_at: datetime
