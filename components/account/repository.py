"""Repository for account operations."""

from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.schemas import AccountCreate, AccountUpdate
from components.core.exceptions import ConflictError, NotFoundError, ValidationError
from components.core.money import to_money
from components.transaction.models import Transaction
from components.transfer.models import Transfer


class AccountRepository:
    """Repository for account operations.

    ``increment_balance`` and ``update_balance`` only stage their write;
    the caller owns the commit.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, owner_id: int, account: AccountCreate) -> Account:
        """Create a new account whose balance starts at its opening balance."""
        opening = to_money(account.opening_balance)
        db_account = Account(
            user_id=owner_id,
            name=account.name,
            type=account.type,
            opening_balance=opening,
            balance=opening,
            version=0,
            pending=0,
        )
        self.session.add(db_account)
        await self.session.commit()
        await self.session.refresh(db_account)
        return db_account

    async def get(self, owner_id: int, account_id: int, refresh: bool = False) -> Optional[Account]:
        """Get account by ID within the owner scope."""
        query = select(Account).where(Account.id == account_id, Account.user_id == owner_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_or_raise(self, owner_id: int, account_id: int, refresh: bool = False) -> Account:
        account = await self.get(owner_id, account_id, refresh=refresh)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    async def get_all(self, owner_id: int) -> List[Account]:
        """Get all accounts of the owner, newest first."""
        result = await self.session.execute(
            select(Account)
            .where(Account.user_id == owner_id)
            .order_by(Account.created_at.desc(), Account.id.desc())
        )
        return list(result.scalars().all())

    async def update(self, owner_id: int, account_id: int, account: AccountUpdate) -> Account:
        """Rename or retype an account."""
        db_account = await self.get_or_raise(owner_id, account_id)
        if account.name is not None:
            db_account.name = account.name
        if account.type is not None:
            db_account.type = account.type
        await self.session.commit()
        await self.session.refresh(db_account)
        return db_account

    async def delete(self, owner_id: int, account_id: int) -> None:
        """Delete an account that no transaction or transfer references."""
        db_account = await self.get_or_raise(owner_id, account_id)

        tx_count = await self.session.scalar(
            select(func.count(Transaction.id)).where(Transaction.account_id == account_id)
        )
        transfer_count = await self.session.scalar(
            select(func.count(Transfer.id)).where(
                (Transfer.source_account_id == account_id)
                | (Transfer.destination_account_id == account_id)
            )
        )
        if tx_count or transfer_count:
            raise ValidationError(
                f"Account {account_id} still has {tx_count} transactions "
                f"and {transfer_count} transfers"
            )

        await self.session.delete(db_account)
        await self.session.commit()

    async def increment_balance(
        self,
        owner_id: int,
        account_id: int,
        delta: Decimal,
        floor: Optional[Decimal] = None,
    ) -> int:
        """
        Add ``delta`` to the stored balance in one UPDATE statement.

        With ``floor`` set the row only changes when the new balance stays at
        or above it. Returns the number of rows changed (0 or 1).
        """
        query = update(Account).where(Account.id == account_id, Account.user_id == owner_id)
        if floor is not None:
            query = query.where(Account.balance + delta >= floor)
        query = query.values(
            balance=Account.balance + delta,
            version=Account.version + 1,
        ).execution_options(synchronize_session=False)
        result = await self.session.execute(query)
        return result.rowcount

    async def adjust_pending(self, owner_id: int, account_ids: Iterable[int], step: int) -> None:
        """Raise or lower the in-flight mutation count of the given accounts."""
        await self.session.execute(
            update(Account)
            .where(Account.id.in_(sorted(set(account_ids))), Account.user_id == owner_id)
            .values(pending=Account.pending + step)
            .execution_options(synchronize_session=False)
        )

    async def update_balance(
        self,
        owner_id: int,
        account_id: int,
        new_balance: Decimal,
        expected_version: int,
    ) -> Account:
        """
        Overwrite the stored balance if nobody changed it since ``expected_version``.

        Refused while a multi-step mutation is in flight on the account.
        """
        result = await self.session.execute(
            update(Account)
            .where(
                Account.id == account_id,
                Account.user_id == owner_id,
                Account.version == expected_version,
                Account.pending == 0,
            )
            .values(balance=new_balance, version=Account.version + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            account = await self.get_or_raise(owner_id, account_id, refresh=True)
            if account.pending:
                raise ConflictError(f"Account {account_id} has {account.pending} mutations in progress")
            raise ConflictError(
                f"Account {account_id} changed since version {expected_version}"
            )
        return await self.get_or_raise(owner_id, account_id, refresh=True)
