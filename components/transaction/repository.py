"""Repository for transaction operations."""

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import case, select, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import NotFoundError
from components.core.money import to_money
from components.transaction.models import Transaction, TransactionType

EDITABLE_FIELDS = ("title", "amount", "type", "category_id", "account_id", "date", "description")


class TransactionRepository:
    """Repository for transaction rows. Writes are flushed, never committed."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get(self, owner_id: int, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID within the owner scope."""
        result = await self.session.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.user_id == owner_id,
            )
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, owner_id: int, transaction_id: int) -> Transaction:
        transaction = await self.get(owner_id, transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    async def get_all(
        self,
        owner_id: int,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Transaction]:
        """Get transactions with optional filtering, newest first."""
        query = select(Transaction).where(Transaction.user_id == owner_id)

        if account_id is not None:
            query = query.where(Transaction.account_id == account_id)
        if category_id is not None:
            query = query.where(Transaction.category_id == category_id)
        if type is not None:
            query = query.where(Transaction.type == type)
        if date_from:
            query = query.where(Transaction.date >= date_from)
        if date_to:
            query = query.where(Transaction.date <= date_to)

        query = query.order_by(Transaction.date.desc(), Transaction.id.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def insert(self, owner_id: int, fields: Dict[str, Any]) -> Transaction:
        """Stage a new transaction row."""
        db_transaction = Transaction(user_id=owner_id, **fields)
        self.session.add(db_transaction)
        await self.session.flush()
        await self.session.refresh(db_transaction)
        return db_transaction

    async def update(self, owner_id: int, transaction_id: int, fields: Dict[str, Any]) -> Transaction:
        """Stage new values for the editable fields of a transaction."""
        db_transaction = await self.get_or_raise(owner_id, transaction_id)
        for name, value in fields.items():
            if name in EDITABLE_FIELDS:
                setattr(db_transaction, name, value)
        await self.session.flush()
        return db_transaction

    async def delete(self, owner_id: int, transaction_id: int) -> None:
        """Stage removal of a transaction row."""
        db_transaction = await self.get_or_raise(owner_id, transaction_id)
        await self.session.delete(db_transaction)
        await self.session.flush()

    async def signed_total(self, owner_id: int, account_id: int) -> Decimal:
        """Income minus expense booked on one account."""
        signed = case(
            (Transaction.type == TransactionType.INCOME, Transaction.amount),
            else_=-Transaction.amount,
        )
        total = await self.session.scalar(
            select(func.coalesce(func.sum(signed), 0)).where(
                Transaction.user_id == owner_id,
                Transaction.account_id == account_id,
            )
        )
        return to_money(total or 0)
