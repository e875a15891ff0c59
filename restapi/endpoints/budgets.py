"""Budget endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.budget import schemas
from components.budget.repository import BudgetRepository
from components.core.init_db import get_db
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Budget, status_code=status.HTTP_201_CREATED)
async def create_budget(
    budget: schemas.BudgetCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await BudgetRepository(db).create(current_user.id, budget)


@router.get("/", response_model=List[schemas.Budget])
async def read_budgets(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await BudgetRepository(db).get_all(current_user.id)


@router.get("/{budget_id}", response_model=schemas.Budget)
async def read_budget(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await BudgetRepository(db).get_or_raise(current_user.id, budget_id)


@router.get("/{budget_id}/progress", response_model=schemas.BudgetProgress)
async def read_budget_progress(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get consumption of a budget in the current month or year.

    Status is ``nominal`` below 75%, ``warning`` from 75% and ``exceeded``
    once spending reaches the limit.
    """
    return await BudgetRepository(db).progress(current_user.id, budget_id)


@router.put("/{budget_id}", response_model=schemas.Budget)
async def update_budget(
    budget_id: int,
    budget: schemas.BudgetUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await BudgetRepository(db).update(current_user.id, budget_id, budget)


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget(
    budget_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await BudgetRepository(db).delete(current_user.id, budget_id)
