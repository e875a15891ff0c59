"""
Transaction lifecycle.

Each mutation changes the transaction row and the balance of the account(s)
it touches as one unit of work. Balance steps run first, so a refused debit
(InsufficientFundsError) leaves nothing written; the row write is always the
last step and needs no compensation.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.balance import BalanceEngine
from components.account.repository import AccountRepository
from components.category.repository import CategoryRepository
from components.core.config import Settings, get_settings
from components.core.exceptions import ValidationError
from components.core.money import to_money
from components.core.unit_of_work import UnitOfWork
from components.transaction.models import Transaction, TransactionType, signed_amount
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionBase, TransactionCreate, TransactionUpdate

logger = structlog.get_logger(__name__)


class TransactionService:
    """Create, update and delete transactions together with their balance effect."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.engine = BalanceEngine(session, self.settings)
        self.transactions = TransactionRepository(session)
        self.accounts = AccountRepository(session)
        self.categories = CategoryRepository(session)

    def _unit_of_work(self, operation: str, owner_id: int, *account_ids: int) -> UnitOfWork:
        return UnitOfWork(
            self.session,
            operation,
            atomic=self.settings.ATOMIC_MUTATIONS,
            hold=lambda step: self.accounts.adjust_pending(owner_id, account_ids, step),
        )

    async def _validate(self, owner_id: int, data: TransactionBase) -> dict:
        """Check amount and references; return the row fields to write."""
        if data.amount is None or Decimal(data.amount) <= 0:
            raise ValidationError("Transaction amount must be greater than zero")
        if not data.title:
            raise ValidationError("Transaction title is required")
        await self.categories.get_or_raise(owner_id, data.category_id)
        await self.accounts.get_or_raise(owner_id, data.account_id)

        fields = data.model_dump()
        fields["amount"] = to_money(data.amount)
        fields["type"] = TransactionType(data.type)
        return fields

    async def get(self, owner_id: int, transaction_id: int) -> Transaction:
        return await self.transactions.get_or_raise(owner_id, transaction_id)

    async def list(
        self,
        owner_id: int,
        account_id: Optional[int] = None,
        category_id: Optional[int] = None,
        type: Optional[TransactionType] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Transaction]:
        """List transactions; with ``account_id`` this is the account statement."""
        if account_id is not None:
            await self.accounts.get_or_raise(owner_id, account_id)
        return await self.transactions.get_all(
            owner_id,
            account_id=account_id,
            category_id=category_id,
            type=type,
            date_from=date_from,
            date_to=date_to,
        )

    async def create(self, owner_id: int, data: TransactionCreate) -> Transaction:
        """Book a new transaction and apply its signed amount to the account."""
        fields = await self._validate(owner_id, data)
        account_id = fields["account_id"]
        delta = signed_amount(fields["amount"], fields["type"])

        async with self._unit_of_work("create_transaction", owner_id, account_id) as uow:
            await uow.step(
                "apply_balance",
                lambda: self.engine.apply_delta(owner_id, account_id, delta),
                compensate=lambda: self.engine.apply_delta(owner_id, account_id, -delta, enforce_floor=False),
                account_ids=(account_id,),
            )
            transaction = await uow.step(
                "insert_transaction",
                lambda: self.transactions.insert(owner_id, fields),
            )

        logger.info(
            "transaction_created",
            owner_id=owner_id,
            transaction_id=transaction.id,
            account_id=account_id,
            delta=str(delta),
        )
        return transaction

    async def update(self, owner_id: int, transaction_id: int, data: TransactionUpdate) -> Transaction:
        """
        Replace a transaction, moving its balance effect as needed.

        On the same account the old and new effects are combined into one
        delta. Across accounts the old effect is reverted on the old account
        before the new one is applied on the new account.
        """
        old = await self.transactions.get_or_raise(owner_id, transaction_id)
        old_account_id = old.account_id
        old_delta = signed_amount(old.amount, old.type)

        fields = await self._validate(owner_id, data)
        new_account_id = fields["account_id"]
        new_delta = signed_amount(fields["amount"], fields["type"])

        async with self._unit_of_work("update_transaction", owner_id, old_account_id, new_account_id) as uow:
            if old_account_id == new_account_id:
                combined = new_delta - old_delta
                if combined != 0:
                    await uow.step(
                        "apply_balance",
                        lambda: self.engine.apply_delta(owner_id, new_account_id, combined),
                        compensate=lambda: self.engine.apply_delta(
                            owner_id, new_account_id, -combined, enforce_floor=False
                        ),
                        account_ids=(new_account_id,),
                    )
            else:
                await uow.step(
                    "revert_old_account",
                    lambda: self.engine.apply_delta(owner_id, old_account_id, -old_delta),
                    compensate=lambda: self.engine.apply_delta(
                        owner_id, old_account_id, old_delta, enforce_floor=False
                    ),
                    account_ids=(old_account_id,),
                )
                await uow.step(
                    "apply_new_account",
                    lambda: self.engine.apply_delta(owner_id, new_account_id, new_delta),
                    compensate=lambda: self.engine.apply_delta(
                        owner_id, new_account_id, -new_delta, enforce_floor=False
                    ),
                    account_ids=(new_account_id,),
                )
            transaction = await uow.step(
                "update_transaction",
                lambda: self.transactions.update(owner_id, transaction_id, fields),
            )

        logger.info(
            "transaction_updated",
            owner_id=owner_id,
            transaction_id=transaction_id,
            old_account_id=old_account_id,
            new_account_id=new_account_id,
            old_delta=str(old_delta),
            new_delta=str(new_delta),
        )
        return transaction

    async def delete(self, owner_id: int, transaction_id: int) -> None:
        """Revert a transaction's effect on its account, then remove it."""
        transaction = await self.transactions.get_or_raise(owner_id, transaction_id)
        account_id = transaction.account_id
        reverse = -signed_amount(transaction.amount, transaction.type)

        async with self._unit_of_work("delete_transaction", owner_id, account_id) as uow:
            await uow.step(
                "revert_balance",
                lambda: self.engine.apply_delta(owner_id, account_id, reverse),
                compensate=lambda: self.engine.apply_delta(owner_id, account_id, -reverse, enforce_floor=False),
                account_ids=(account_id,),
            )
            await uow.step(
                "delete_transaction",
                lambda: self.transactions.delete(owner_id, transaction_id),
            )

        logger.info(
            "transaction_deleted",
            owner_id=owner_id,
            transaction_id=transaction_id,
            account_id=account_id,
            delta=str(reverse),
        )
