"""Budget model for the database."""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, DateTime, Enum, ForeignKey, Numeric

from components.core.database import Base


class BudgetPeriod(str, enum.Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class Budget(Base):
    """Spending limit for one category over a month or a year."""
    __tablename__ = "budgets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # Limit
    period = Column(Enum(BudgetPeriod, values_callable=lambda e: [m.value for m in e]), nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
