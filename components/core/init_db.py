"""Database initialization and dependency injection."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

import fastapi
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
# Import all models to ensure they're registered
import components.user.models
import components.account.models
import components.category.models
import components.transaction.models
import components.transfer.models
import components.budget.models
import components.goal.models
import components.bill.models

# Create a single instance of DatabaseManager
db_manager = DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with db_manager.get_db() as session:
        yield session


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
    """Create missing tables on startup and release the pool on shutdown."""
    await db_manager.create_tables()
    yield
    await db_manager.dispose()


def init_db(app: fastapi.FastAPI) -> None:
    """Initialize database connection."""
    # Add database session dependency to the app
    app.dependency_overrides[AsyncSession] = get_db
