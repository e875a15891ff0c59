"""
Balance engine.

The stored ``accounts.balance`` column is the single source of truth. It
only moves through ``apply_delta``, an atomic conditional increment, so two
sessions adding deltas to the same account at once cannot lose either one
and the funds check never acts on a stale read.

``recompute`` derives the balance from history:

    opening_balance + signed transactions + transfers in - transfers out

and is used only by the reconciliation pass (``find_drift`` /
``reconcile``), which writes through an optimistic version check so it can
never overwrite a delta that landed while it was computing.
"""

from decimal import Decimal
from typing import List, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from components.account import schemas
from components.account.repository import AccountRepository
from components.core.config import Settings, get_settings
from components.core.exceptions import ConflictError, InsufficientFundsError, NotFoundError
from components.core.money import to_money
from components.transaction.repository import TransactionRepository
from components.transfer.repository import TransferRepository

logger = structlog.get_logger(__name__)


class BalanceEngine:
    """Applies balance deltas and reconciles stored balances for one session."""

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.accounts = AccountRepository(session)
        self.transactions = TransactionRepository(session)
        self.transfers = TransferRepository(session)

    @property
    def floor(self) -> Optional[Decimal]:
        """Lowest balance a debit may leave behind, or None when unenforced."""
        if not self.settings.ENFORCE_BALANCE_FLOOR:
            return None
        return to_money(self.settings.BALANCE_FLOOR)

    async def apply_delta(
        self,
        owner_id: int,
        account_id: int,
        delta: Decimal,
        enforce_floor: bool = True,
    ) -> Decimal:
        """
        Add a signed amount to an account balance and return the new balance.

        ``enforce_floor=False`` is for compensating actions that put back a
        balance the account already had.

        Raises:
            NotFoundError: account does not resolve under the owner
            InsufficientFundsError: a negative delta would cross the floor
        """
        delta = to_money(delta)
        floor = self.floor if delta < 0 and enforce_floor else None

        changed = await self.accounts.increment_balance(owner_id, account_id, delta, floor)
        if not changed:
            account = await self.accounts.get(owner_id, account_id, refresh=True)
            if account is None:
                raise NotFoundError("Account", account_id)
            logger.warning(
                "insufficient_funds",
                owner_id=owner_id,
                account_id=account_id,
                balance=str(account.balance),
                delta=str(delta),
                floor=str(floor),
            )
            raise InsufficientFundsError(account_id, account.balance, delta, floor)

        account = await self.accounts.get_or_raise(owner_id, account_id, refresh=True)
        logger.debug(
            "balance_delta_applied",
            owner_id=owner_id,
            account_id=account_id,
            delta=str(delta),
            balance=str(account.balance),
        )
        return to_money(account.balance)

    async def recompute(self, owner_id: int, account_id: int) -> Decimal:
        """Balance implied by the opening balance and the account's history."""
        account = await self.accounts.get_or_raise(owner_id, account_id)
        booked = await self.transactions.signed_total(owner_id, account_id)
        incoming, outgoing = await self.transfers.totals(owner_id, account_id)
        return to_money(account.opening_balance) + booked + incoming - outgoing

    async def check(self, owner_id: int, account_id: int) -> schemas.BalanceDrift:
        """Compare one stored balance with its recomputed value."""
        account = await self.accounts.get_or_raise(owner_id, account_id, refresh=True)
        stored = to_money(account.balance)
        recomputed = await self.recompute(owner_id, account_id)
        return schemas.BalanceDrift(
            account_id=account_id,
            stored_balance=stored,
            recomputed_balance=recomputed,
            drift=stored - recomputed,
        )

    async def find_drift(self, owner_id: int) -> List[schemas.BalanceDrift]:
        """Every account of the owner whose stored balance disagrees with history."""
        drifted = []
        for account in await self.accounts.get_all(owner_id):
            result = await self.check(owner_id, account.id)
            if result.drift != 0:
                drifted.append(result)
        if drifted:
            logger.warning(
                "balance_drift_detected",
                owner_id=owner_id,
                account_ids=[d.account_id for d in drifted],
            )
        return drifted

    async def reconcile(self, owner_id: int, account_id: int) -> schemas.BalanceDrift:
        """
        Correct a stored balance to its recomputed value and commit.

        Retries on ConflictError, which means an ``apply_delta`` committed
        between the read and the write, or an operation on the account is
        still in flight.
        """
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.settings.CONFLICT_RETRY_ATTEMPTS),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(ConflictError),
            reraise=True,
        ):
            with attempt:
                return await self._reconcile_once(owner_id, account_id)

    async def _reconcile_once(self, owner_id: int, account_id: int) -> schemas.BalanceDrift:
        # Version is read before the history sums so any later delta bumps it
        account = await self.accounts.get_or_raise(owner_id, account_id, refresh=True)
        stored = to_money(account.balance)
        version = account.version
        recomputed = await self.recompute(owner_id, account_id)
        result = schemas.BalanceDrift(
            account_id=account_id,
            stored_balance=stored,
            recomputed_balance=recomputed,
            drift=stored - recomputed,
        )
        if result.drift == 0:
            await self.session.rollback()
            return result

        try:
            await self.accounts.update_balance(owner_id, account_id, recomputed, version)
            await self.session.commit()
        except ConflictError:
            await self.session.rollback()
            logger.info("reconcile_conflict", owner_id=owner_id, account_id=account_id)
            raise

        logger.warning(
            "balance_reconciled",
            owner_id=owner_id,
            account_id=account_id,
            stored=str(stored),
            recomputed=str(recomputed),
        )
        result.repaired = True
        return result
