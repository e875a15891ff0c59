"""Pydantic schemas for account data validation."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from components.account.models import AccountType
from components.core.schemas import Money


class AccountBase(BaseModel):
    """Base account schema."""
    name: str = Field(..., min_length=1, max_length=100)
    type: AccountType


class AccountCreate(AccountBase):
    """Schema for account creation."""
    opening_balance: Money = Decimal("0.00")


class AccountUpdate(BaseModel):
    """Schema for renaming or retyping an account. Balance is not editable."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[AccountType] = None


class Account(AccountBase):
    """Schema for account response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    opening_balance: Decimal
    balance: Decimal
    created_at: datetime


class BalanceDrift(BaseModel):
    """Stored balance compared with the balance recomputed from history."""
    account_id: int
    stored_balance: Decimal
    recomputed_balance: Decimal
    drift: Decimal
    repaired: bool = False
