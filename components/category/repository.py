"""Repository for category operations."""

from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from components.bill.models import Bill
from components.budget.models import Budget
from components.category.models import Category
from components.category.schemas import CategoryCreate, CategoryUpdate
from components.core.exceptions import NotFoundError, ValidationError
from components.transaction.models import Transaction


class CategoryRepository:
    """Repository for category operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, owner_id: int, category: CategoryCreate) -> Category:
        """Create a new category."""
        db_category = Category(user_id=owner_id, **category.model_dump())
        self.session.add(db_category)
        await self.session.commit()
        await self.session.refresh(db_category)
        return db_category

    async def get(self, owner_id: int, category_id: int) -> Optional[Category]:
        """Get category by ID within the owner scope."""
        result = await self.session.execute(
            select(Category).where(Category.id == category_id, Category.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, owner_id: int, category_id: int) -> Category:
        category = await self.get(owner_id, category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    async def get_all(self, owner_id: int) -> List[Category]:
        """Get all categories of the owner, ordered by name."""
        result = await self.session.execute(
            select(Category).where(Category.user_id == owner_id).order_by(Category.name)
        )
        return list(result.scalars().all())

    async def update(self, owner_id: int, category_id: int, category: CategoryUpdate) -> Category:
        """Update category by ID."""
        db_category = await self.get_or_raise(owner_id, category_id)
        for name, value in category.model_dump(exclude_none=True).items():
            setattr(db_category, name, value)
        await self.session.commit()
        await self.session.refresh(db_category)
        return db_category

    async def delete(self, owner_id: int, category_id: int) -> None:
        """Delete a category that nothing references."""
        db_category = await self.get_or_raise(owner_id, category_id)

        for model in (Transaction, Budget, Bill):
            in_use = await self.session.scalar(
                select(func.count(model.id)).where(model.category_id == category_id)
            )
            if in_use:
                raise ValidationError(
                    f"Category {category_id} is used by {in_use} {model.__tablename__}"
                )

        await self.session.delete(db_category)
        await self.session.commit()
