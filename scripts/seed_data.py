"""Script to seed demo data into the database."""

from datetime import date, timedelta
from decimal import Decimal
import asyncio

from sqlalchemy import text

from components.account.models import AccountType
from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate
from components.budget.models import BudgetPeriod
from components.budget.repository import BudgetRepository
from components.budget.schemas import BudgetCreate
from components.category.repository import CategoryRepository
from components.category.schemas import CategoryCreate
from components.core.init_db import db_manager, get_db
from components.goal.repository import GoalRepository
from components.goal.schemas import GoalCreate
from components.transaction.models import TransactionType
from components.transaction.schemas import TransactionCreate
from components.transaction.service import TransactionService
from components.transfer.schemas import TransferCreate
from components.transfer.service import TransferService
from components.user.repository import UserRepository
from components.user.schemas import UserCreate


async def seed_data():
    """Seed demo data into the database."""
    await db_manager.create_tables()

    async for db in get_db():
        # Clear existing data
        for table in ("transfers", "transactions", "bills", "budgets", "goals", "categories", "accounts", "users"):
            await db.execute(text(f"DELETE FROM {table}"))
        await db.commit()

        user = await UserRepository(db).create(
            UserCreate(login="demo", name="Demo User", password="password123")
        )

        accounts = AccountRepository(db)
        checking = await accounts.create(
            user.id, AccountCreate(name="Checking", type=AccountType.CHECKING, opening_balance=Decimal("1000.00"))
        )
        savings = await accounts.create(
            user.id, AccountCreate(name="Savings", type=AccountType.SAVINGS, opening_balance=Decimal("5000.00"))
        )

        categories = CategoryRepository(db)
        salary = await categories.create(user.id, CategoryCreate(name="Salary", color="#16a34a", icon="💼"))
        groceries = await categories.create(user.id, CategoryCreate(name="Groceries", color="#f97316", icon="🛒"))
        rent = await categories.create(user.id, CategoryCreate(name="Rent", color="#dc2626", icon="🏠"))

        transactions = TransactionService(db)
        today = date.today()
        for title, amount, type_, category, days_ago in [
            ("Salary", "3200.00", TransactionType.INCOME, salary, 20),
            ("Rent", "1200.00", TransactionType.EXPENSE, rent, 18),
            ("Supermarket", "86.40", TransactionType.EXPENSE, groceries, 10),
            ("Farmers market", "32.15", TransactionType.EXPENSE, groceries, 3),
        ]:
            await transactions.create(user.id, TransactionCreate(
                title=title,
                amount=Decimal(amount),
                type=type_,
                category_id=category.id,
                account_id=checking.id,
                date=today - timedelta(days=days_ago),
            ))

        await TransferService(db).transfer(user.id, TransferCreate(
            source_account_id=checking.id,
            destination_account_id=savings.id,
            amount=Decimal("500.00"),
            description="Monthly savings",
            date=today,
        ))

        await BudgetRepository(db).create(
            user.id, BudgetCreate(category_id=groceries.id, amount=Decimal("400.00"), period=BudgetPeriod.MONTHLY)
        )
        await GoalRepository(db).create(user.id, GoalCreate(
            title="Emergency fund",
            target_amount=Decimal("10000.00"),
            current_amount=Decimal("5500.00"),
            target_date=today + timedelta(days=180),
        ))


if __name__ == "__main__":
    asyncio.run(seed_data())
