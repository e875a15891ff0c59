"""Transfers between two accounts of the same owner."""

from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.balance import BalanceEngine
from components.account.repository import AccountRepository
from components.core.config import Settings, get_settings
from components.core.exceptions import ValidationError
from components.core.money import to_money
from components.core.unit_of_work import UnitOfWork
from components.transfer.models import Transfer
from components.transfer.repository import TransferRepository
from components.transfer.schemas import TransferCreate

logger = structlog.get_logger(__name__)


class TransferService:
    """Debit the source, credit the destination and record the transfer."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.engine = BalanceEngine(session, self.settings)
        self.accounts = AccountRepository(session)
        self.transfers = TransferRepository(session)

    async def get(self, owner_id: int, transfer_id: int) -> Transfer:
        return await self.transfers.get_or_raise(owner_id, transfer_id)

    async def list(self, owner_id: int, account_id: Optional[int] = None) -> List[Transfer]:
        return await self.transfers.get_all(owner_id, account_id=account_id)

    async def transfer(self, owner_id: int, data: TransferCreate) -> Transfer:
        """
        Move ``data.amount`` from the source account to the destination.

        The debit is floor-checked, so an amount above the source balance is
        refused with InsufficientFundsError and neither balance changes.
        """
        source_id = data.source_account_id
        destination_id = data.destination_account_id
        if source_id == destination_id:
            raise ValidationError("Source and destination accounts must differ")
        if data.amount is None or data.amount <= 0:
            raise ValidationError("Transfer amount must be greater than zero")
        await self.accounts.get_or_raise(owner_id, source_id)
        await self.accounts.get_or_raise(owner_id, destination_id)

        amount = to_money(data.amount)
        record = data.model_copy(update={"amount": amount})

        async with UnitOfWork(
            self.session,
            "transfer",
            atomic=self.settings.ATOMIC_MUTATIONS,
            hold=lambda step: self.accounts.adjust_pending(owner_id, (source_id, destination_id), step),
        ) as uow:
            await uow.step(
                "debit_source",
                lambda: self.engine.apply_delta(owner_id, source_id, -amount),
                compensate=lambda: self.engine.apply_delta(owner_id, source_id, amount),
                account_ids=(source_id,),
            )
            await uow.step(
                "credit_destination",
                lambda: self.engine.apply_delta(owner_id, destination_id, amount),
                compensate=lambda: self.engine.apply_delta(
                    owner_id, destination_id, -amount, enforce_floor=False
                ),
                account_ids=(destination_id,),
            )
            transfer = await uow.step(
                "record_transfer",
                lambda: self.transfers.insert(owner_id, record),
            )

        logger.info(
            "transfer_completed",
            owner_id=owner_id,
            transfer_id=transfer.id,
            source_account_id=source_id,
            destination_account_id=destination_id,
            amount=str(amount),
        )
        return transfer
