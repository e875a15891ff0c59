"""Repository for budget operations."""

from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget.models import Budget
from components.budget.progress import budget_progress, period_bounds
from components.budget.schemas import BudgetCreate, BudgetProgress, BudgetUpdate
from components.category.repository import CategoryRepository
from components.core.exceptions import NotFoundError
from components.transaction.models import TransactionType
from components.transaction.repository import TransactionRepository


class BudgetRepository:
    """Repository for budget operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.categories = CategoryRepository(session)

    async def create(self, owner_id: int, budget: BudgetCreate) -> Budget:
        """Create a new budget for one of the owner's categories."""
        await self.categories.get_or_raise(owner_id, budget.category_id)
        db_budget = Budget(user_id=owner_id, **budget.model_dump())
        self.session.add(db_budget)
        await self.session.commit()
        await self.session.refresh(db_budget)
        return db_budget

    async def get(self, owner_id: int, budget_id: int) -> Optional[Budget]:
        result = await self.session.execute(
            select(Budget).where(Budget.id == budget_id, Budget.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, owner_id: int, budget_id: int) -> Budget:
        budget = await self.get(owner_id, budget_id)
        if budget is None:
            raise NotFoundError("Budget", budget_id)
        return budget

    async def get_all(self, owner_id: int) -> List[Budget]:
        result = await self.session.execute(
            select(Budget)
            .where(Budget.user_id == owner_id)
            .order_by(Budget.created_at.desc(), Budget.id.desc())
        )
        return list(result.scalars().all())

    async def update(self, owner_id: int, budget_id: int, budget: BudgetUpdate) -> Budget:
        db_budget = await self.get_or_raise(owner_id, budget_id)
        changes = budget.model_dump(exclude_none=True)
        if "category_id" in changes:
            await self.categories.get_or_raise(owner_id, changes["category_id"])
        for name, value in changes.items():
            setattr(db_budget, name, value)
        await self.session.commit()
        await self.session.refresh(db_budget)
        return db_budget

    async def delete(self, owner_id: int, budget_id: int) -> None:
        db_budget = await self.get_or_raise(owner_id, budget_id)
        await self.session.delete(db_budget)
        await self.session.commit()

    async def progress(self, owner_id: int, budget_id: int, today: Optional[date] = None) -> BudgetProgress:
        """Spent amount, percentage and status of a budget for the current period."""
        budget = await self.get_or_raise(owner_id, budget_id)
        today = today or date.today()
        start, end = period_bounds(budget.period, today)
        expenses = await TransactionRepository(self.session).get_all(
            owner_id,
            category_id=budget.category_id,
            type=TransactionType.EXPENSE,
            date_from=start,
            date_to=end,
        )
        return budget_progress(budget, expenses, today)
