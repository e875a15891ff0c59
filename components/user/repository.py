"""Repository for user operations."""

from datetime import date
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.user.models import User
from components.user.schemas import UserCreate, UserUpdate
from components.core.security import get_password_hash


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user: UserCreate) -> User:
        """Create a new user."""
        db_user = User(
            login=user.login,
            name=user.name,
            password=get_password_hash(user.password),
            registration_date=date.today()
        )
        self.session.add(db_user)
        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_login(self, login: str) -> Optional[User]:
        """Get user by login."""
        result = await self.session.execute(
            select(User).where(User.login == login)
        )
        return result.scalar_one_or_none()

    async def update(self, user_id: int, user: UserUpdate) -> Optional[User]:
        """Update profile fields of a user."""
        db_user = await self.get_by_id(user_id)
        if not db_user:
            return None

        if user.name is not None:
            db_user.name = user.name
        if user.password:
            db_user.password = get_password_hash(user.password)

        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

    async def exists(self, login: str) -> bool:
        """Check if user with given login exists."""
        result = await self.session.execute(
            select(User.id).where(User.login == login)
        )
        return result.scalar_one_or_none() is not None
