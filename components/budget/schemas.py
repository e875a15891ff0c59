"""Pydantic schemas for budget data validation."""

import enum
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from components.budget.models import BudgetPeriod
from components.core.schemas import PositiveMoney


class BudgetBase(BaseModel):
    """Base budget schema."""
    category_id: int
    amount: PositiveMoney
    period: BudgetPeriod


class BudgetCreate(BudgetBase):
    """Schema for budget creation."""
    pass


class BudgetUpdate(BaseModel):
    """Schema for budget update."""
    category_id: Optional[int] = None
    amount: Optional[PositiveMoney] = None
    period: Optional[BudgetPeriod] = None


class Budget(BudgetBase):
    """Schema for budget response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    amount: Decimal
    created_at: datetime


class BudgetStatus(str, enum.Enum):
    NOMINAL = "nominal"
    WARNING = "warning"
    EXCEEDED = "exceeded"


class BudgetProgress(BaseModel):
    """Schema for budget consumption in the current period."""
    budget_id: int
    category_id: int
    spent: Decimal
    limit: Decimal
    pct: int
    status: BudgetStatus
