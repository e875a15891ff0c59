"""
Shared fixtures.

Each test gets its own SQLite file database behind the same DatabaseManager
the application uses, so atomic updates and commits behave like a real
store with several connections. Fixtures hand out ids rather than ORM
objects because a rolled back session expires every loaded instance.
"""

from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

import components.core.init_db  # noqa: F401  registers every model
from components.account.models import AccountType
from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate
from components.category.repository import CategoryRepository
from components.category.schemas import CategoryCreate
from components.core.config import Settings
from components.core.database import DatabaseManager
from components.user.repository import UserRepository
from components.user.schemas import UserCreate


def make_settings(**overrides) -> Settings:
    values = dict(
        DB_URL="sqlite+aiosqlite://",
        ENFORCE_BALANCE_FLOOR=True,
        BALANCE_FLOOR=Decimal("0.00"),
        ATOMIC_MUTATIONS=True,
        CONFLICT_RETRY_ATTEMPTS=3,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings_factory():
    return make_settings


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def no_floor_settings() -> Settings:
    return make_settings(ENFORCE_BALANCE_FLOOR=False)


@pytest.fixture
def compensating_settings() -> Settings:
    return make_settings(ATOMIC_MUTATIONS=False)


@pytest.fixture
async def database(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    manager = DatabaseManager(engine)
    await manager.create_tables()
    yield manager
    await manager.dispose()


@pytest.fixture
async def session(database):
    async with database.get_db() as session:
        yield session


@pytest.fixture
def make_user(session):
    async def _make_user(login: str) -> int:
        user = await UserRepository(session).create(UserCreate(login=login, password="secret123"))
        return user.id

    return _make_user


@pytest.fixture
def make_account(session):
    async def _make_account(
        owner_id: int,
        opening_balance: str = "0.00",
        name: str = "Checking",
        type: AccountType = AccountType.CHECKING,
    ) -> int:
        account = await AccountRepository(session).create(
            owner_id,
            AccountCreate(name=name, type=type, opening_balance=Decimal(opening_balance)),
        )
        return account.id

    return _make_account


@pytest.fixture
def make_category(session):
    async def _make_category(owner_id: int, name: str = "General") -> int:
        category = await CategoryRepository(session).create(owner_id, CategoryCreate(name=name))
        return category.id

    return _make_category


@pytest.fixture
def balance_of(session):
    async def _balance_of(owner_id: int, account_id: int) -> Decimal:
        account = await AccountRepository(session).get_or_raise(owner_id, account_id, refresh=True)
        return Decimal(account.balance)

    return _balance_of


@pytest.fixture
async def owner(make_user) -> int:
    return await make_user("alice")


@pytest.fixture
async def other_owner(make_user) -> int:
    return await make_user("mallory")


@pytest.fixture
async def category(make_category, owner) -> int:
    return await make_category(owner)


@pytest.fixture
async def checking(make_account, owner) -> int:
    return await make_account(owner, "1000.00", name="Checking")


@pytest.fixture
async def savings(make_account, owner) -> int:
    return await make_account(owner, "0.00", name="Savings", type=AccountType.SAVINGS)
