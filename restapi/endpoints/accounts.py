"""Account endpoints for the API."""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.account import schemas
from components.account.balance import BalanceEngine
from components.account.repository import AccountRepository
from components.core.init_db import get_db
from components.transaction import schemas as transaction_schemas
from components.transaction.service import TransactionService
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Account, status_code=status.HTTP_201_CREATED)
async def create_account(
    account: schemas.AccountCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create an account; its balance starts at the opening balance."""
    return await AccountRepository(db).create(current_user.id, account)


@router.get("/", response_model=List[schemas.Account])
async def read_accounts(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all accounts of the current user."""
    return await AccountRepository(db).get_all(current_user.id)


@router.get("/drift", response_model=List[schemas.BalanceDrift])
async def read_balance_drift(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """List accounts whose stored balance disagrees with their history."""
    return await BalanceEngine(db).find_drift(current_user.id)


@router.get("/{account_id}", response_model=schemas.Account)
async def read_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific account by ID."""
    return await AccountRepository(db).get_or_raise(current_user.id, account_id)


@router.get("/{account_id}/statement", response_model=List[transaction_schemas.Transaction])
async def read_statement(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get every transaction booked on an account, newest first."""
    return await TransactionService(db).list(current_user.id, account_id=account_id)


@router.put("/{account_id}", response_model=schemas.Account)
async def update_account(
    account_id: int,
    account: schemas.AccountUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rename or retype an account."""
    return await AccountRepository(db).update(current_user.id, account_id, account)


@router.post("/{account_id}/reconcile", response_model=schemas.BalanceDrift)
async def reconcile_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Correct the stored balance of an account to the value its history implies."""
    return await BalanceEngine(db).reconcile(current_user.id, account_id)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_account(
    account_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete an account that has no transactions or transfers."""
    await AccountRepository(db).delete(current_user.id, account_id)
