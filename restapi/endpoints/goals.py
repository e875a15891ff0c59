"""Goal endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.goal import schemas
from components.goal.repository import GoalRepository
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/goals",
    tags=["goals"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Goal, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal: schemas.GoalCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await GoalRepository(db).create(current_user.id, goal)


@router.get("/", response_model=List[schemas.Goal])
async def read_goals(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await GoalRepository(db).get_all(current_user.id)


@router.get("/{goal_id}", response_model=schemas.Goal)
async def read_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await GoalRepository(db).get_or_raise(current_user.id, goal_id)


@router.get("/{goal_id}/progress", response_model=schemas.GoalProgress)
async def read_goal_progress(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get completion percentage and days left until the target date."""
    return await GoalRepository(db).progress(current_user.id, goal_id)


@router.post("/{goal_id}/contributions", response_model=schemas.Goal)
async def contribute_to_goal(
    goal_id: int,
    contribution: schemas.GoalContribution,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Add money saved towards a goal."""
    return await GoalRepository(db).contribute(current_user.id, goal_id, contribution.amount)


@router.put("/{goal_id}", response_model=schemas.Goal)
async def update_goal(
    goal_id: int,
    goal: schemas.GoalUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await GoalRepository(db).update(current_user.id, goal_id, goal)


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await GoalRepository(db).delete(current_user.id, goal_id)
