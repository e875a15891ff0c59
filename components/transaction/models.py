"""Transaction model for the database."""

import enum
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum, ForeignKey, Numeric

from components.core.database import Base


class TransactionType(str, enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


def signed_amount(amount: Decimal, type_: TransactionType) -> Decimal:
    """Amount with the sign its type applies to the account balance."""
    return Decimal(amount) if TransactionType(type_) is TransactionType.INCOME else -Decimal(amount)


class Transaction(Base):
    """Income or expense booked against one account."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)  # Always positive
    type = Column(Enum(TransactionType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    @property
    def signed_amount(self) -> Decimal:
        return signed_amount(self.amount, self.type)
