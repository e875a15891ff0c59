"""Pydantic schemas for goal data validation."""

import enum
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from components.core.schemas import NonNegativeMoney, PositiveMoney


class GoalBase(BaseModel):
    """Base goal schema."""
    title: str = Field(..., min_length=1, max_length=200)
    target_amount: PositiveMoney
    current_amount: NonNegativeMoney = Decimal("0.00")
    target_date: date


class GoalCreate(GoalBase):
    """Schema for goal creation."""
    pass


class GoalUpdate(BaseModel):
    """Schema for goal update."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    target_amount: Optional[PositiveMoney] = None
    current_amount: Optional[NonNegativeMoney] = None
    target_date: Optional[date] = None


class GoalContribution(BaseModel):
    """Schema for adding money to a goal."""
    amount: PositiveMoney


class Goal(GoalBase):
    """Schema for goal response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    target_amount: Decimal
    current_amount: Decimal
    created_at: datetime


class GoalStatus(str, enum.Enum):
    EXPIRED = "expired"
    DUE_TODAY = "due_today"
    COUNTDOWN = "countdown"


class GoalProgress(BaseModel):
    """Schema for goal completion and time left."""
    goal_id: int
    pct: int
    remaining_days: int
    status: GoalStatus
