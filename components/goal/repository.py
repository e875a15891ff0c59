"""Repository for goal operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import NotFoundError
from components.core.money import to_money
from components.goal.models import Goal
from components.goal.progress import goal_progress
from components.goal.schemas import GoalCreate, GoalProgress, GoalUpdate


class GoalRepository:
    """Repository for goal operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, owner_id: int, goal: GoalCreate) -> Goal:
        db_goal = Goal(user_id=owner_id, **goal.model_dump())
        self.session.add(db_goal)
        await self.session.commit()
        await self.session.refresh(db_goal)
        return db_goal

    async def get(self, owner_id: int, goal_id: int) -> Optional[Goal]:
        result = await self.session.execute(
            select(Goal).where(Goal.id == goal_id, Goal.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, owner_id: int, goal_id: int) -> Goal:
        goal = await self.get(owner_id, goal_id)
        if goal is None:
            raise NotFoundError("Goal", goal_id)
        return goal

    async def get_all(self, owner_id: int) -> List[Goal]:
        result = await self.session.execute(
            select(Goal)
            .where(Goal.user_id == owner_id)
            .order_by(Goal.created_at.desc(), Goal.id.desc())
        )
        return list(result.scalars().all())

    async def update(self, owner_id: int, goal_id: int, goal: GoalUpdate) -> Goal:
        db_goal = await self.get_or_raise(owner_id, goal_id)
        for name, value in goal.model_dump(exclude_none=True).items():
            setattr(db_goal, name, value)
        await self.session.commit()
        await self.session.refresh(db_goal)
        return db_goal

    async def contribute(self, owner_id: int, goal_id: int, amount: Decimal) -> Goal:
        """Add money saved towards a goal in one UPDATE statement."""
        result = await self.session.execute(
            update(Goal)
            .where(Goal.id == goal_id, Goal.user_id == owner_id)
            .values(current_amount=Goal.current_amount + to_money(amount))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.session.rollback()
            raise NotFoundError("Goal", goal_id)
        await self.session.commit()
        db_goal = await self.get_or_raise(owner_id, goal_id)
        await self.session.refresh(db_goal)
        return db_goal

    async def delete(self, owner_id: int, goal_id: int) -> None:
        db_goal = await self.get_or_raise(owner_id, goal_id)
        await self.session.delete(db_goal)
        await self.session.commit()

    async def progress(self, owner_id: int, goal_id: int, now: Optional[datetime] = None) -> GoalProgress:
        """Completion percentage and days left of a goal."""
        return goal_progress(await self.get_or_raise(owner_id, goal_id), now)
