"""Transaction endpoints for the API."""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.transaction import schemas
from components.transaction.models import TransactionType
from components.transaction.service import TransactionService
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction: schemas.TransactionCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Book an income or expense and apply it to the account balance.

    Expenses that would take the account below the balance floor are
    refused with code ``insufficient_funds``.
    """
    return await TransactionService(db).create(current_user.id, transaction)


@router.get("/", response_model=List[schemas.Transaction])
async def read_transactions(
    account_id: Optional[int] = Query(None, description="Only transactions of this account"),
    category_id: Optional[int] = Query(None, description="Only transactions of this category"),
    type: Optional[TransactionType] = Query(None, description="income or expense"),
    date_from: Optional[date] = Query(None, description="Transactions on or after this date"),
    date_to: Optional[date] = Query(None, description="Transactions on or before this date"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get transactions of the current user with optional filtering."""
    return await TransactionService(db).list(
        current_user.id,
        account_id=account_id,
        category_id=category_id,
        type=type,
        date_from=date_from,
        date_to=date_to,
    )


@router.get("/{transaction_id}", response_model=schemas.Transaction)
async def read_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await TransactionService(db).get(current_user.id, transaction_id)


@router.put("/{transaction_id}", response_model=schemas.Transaction)
async def update_transaction(
    transaction_id: int,
    transaction: schemas.TransactionUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Replace a transaction; balances of the old and new account follow."""
    return await TransactionService(db).update(current_user.id, transaction_id, transaction)


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a transaction and revert its effect on the account balance."""
    await TransactionService(db).delete(current_user.id, transaction_id)
