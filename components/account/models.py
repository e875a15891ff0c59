"""Account model for the database."""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Enum, ForeignKey, Numeric

from components.core.database import Base


class AccountType(str, enum.Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    WALLET = "wallet"
    INVESTMENT = "investment"


class Account(Base):
    """Account model; ``balance`` is the stored source of truth."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    type = Column(Enum(AccountType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    # Base of the recomputed balance; never changes after creation
    opening_balance = Column(Numeric(12, 2), nullable=False, default=0)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    version = Column(Integer, nullable=False, default=0)
    # Multi-step mutations in flight; reconciliation waits for zero
    pending = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
