"""Transfer endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.transfer import schemas
from components.transfer.service import TransferService
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/transfers",
    tags=["transfers"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Transfer, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    transfer: schemas.TransferCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Move money between two accounts of the current user."""
    return await TransferService(db).transfer(current_user.id, transfer)


@router.get("/", response_model=List[schemas.Transfer])
async def read_transfers(
    account_id: Optional[int] = Query(None, description="Transfers from or to this account"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await TransferService(db).list(current_user.id, account_id=account_id)


@router.get("/{transfer_id}", response_model=schemas.Transfer)
async def read_transfer(
    transfer_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await TransferService(db).get(current_user.id, transfer_id)
