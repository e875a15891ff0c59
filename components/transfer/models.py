"""Transfer model for the database."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Text, Date, DateTime, ForeignKey, Numeric

from components.core.database import Base


class Transfer(Base):
    """Movement of money from one account to another of the same owner."""
    __tablename__ = "transfers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    source_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    destination_account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
