"""Pydantic schemas for report responses."""

from decimal import Decimal
from typing import List

from pydantic import BaseModel


class MonthSummary(BaseModel):
    """Schema for one month of income and expense."""
    month: int
    year: int
    income: Decimal
    expense: Decimal
    net: Decimal


class YearSummary(BaseModel):
    """Schema for yearly income and expense, month by month."""
    year: int
    total_income: Decimal
    total_expense: Decimal
    net: Decimal
    monthly_summaries: List[MonthSummary]


class CategoryTotal(BaseModel):
    """Schema for expense total of one category."""
    category_id: int
    category_name: str
    total: Decimal
    share_percentage: int
