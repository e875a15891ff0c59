"""Repository for transfer operations."""

from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import NotFoundError
from components.core.money import to_money
from components.transfer.models import Transfer
from components.transfer.schemas import TransferCreate


class TransferRepository:
    """Repository for transfer records. Writes are flushed, never committed."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def insert(self, owner_id: int, transfer: TransferCreate) -> Transfer:
        db_transfer = Transfer(
            user_id=owner_id,
            source_account_id=transfer.source_account_id,
            destination_account_id=transfer.destination_account_id,
            amount=transfer.amount,
            description=transfer.description,
            date=transfer.date,
        )
        self.session.add(db_transfer)
        await self.session.flush()
        await self.session.refresh(db_transfer)
        return db_transfer

    async def get(self, owner_id: int, transfer_id: int) -> Optional[Transfer]:
        result = await self.session.execute(
            select(Transfer).where(Transfer.id == transfer_id, Transfer.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, owner_id: int, transfer_id: int) -> Transfer:
        transfer = await self.get(owner_id, transfer_id)
        if transfer is None:
            raise NotFoundError("Transfer", transfer_id)
        return transfer

    async def get_all(self, owner_id: int, account_id: Optional[int] = None) -> List[Transfer]:
        """Get transfers, newest first; ``account_id`` matches either side."""
        query = select(Transfer).where(Transfer.user_id == owner_id)
        if account_id is not None:
            query = query.where(
                (Transfer.source_account_id == account_id)
                | (Transfer.destination_account_id == account_id)
            )
        query = query.order_by(Transfer.date.desc(), Transfer.id.desc())
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def totals(self, owner_id: int, account_id: int) -> Tuple[Decimal, Decimal]:
        """Sum of transfers into and out of one account."""
        incoming = await self.session.scalar(
            select(func.coalesce(func.sum(Transfer.amount), 0)).where(
                Transfer.user_id == owner_id,
                Transfer.destination_account_id == account_id,
            )
        )
        outgoing = await self.session.scalar(
            select(func.coalesce(func.sum(Transfer.amount), 0)).where(
                Transfer.user_id == owner_id,
                Transfer.source_account_id == account_id,
            )
        )
        return to_money(incoming or 0), to_money(outgoing or 0)
