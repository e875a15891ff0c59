"""Bill model for the database."""

import enum
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Integer, String, Date, DateTime, Enum, ForeignKey, Numeric

from components.core.database import Base


class BillType(str, enum.Enum):
    PAYABLE = "payable"
    RECEIVABLE = "receivable"


class BillStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    RECEIVED = "received"
    LATE = "late"


class Bill(Base):
    """Bill to pay or to receive by a due date."""
    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    type = Column(Enum(BillType, values_callable=lambda e: [m.value for m in e]), nullable=False)
    description = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(
        Enum(BillStatus, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BillStatus.PENDING,
    )
    is_recurring = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
