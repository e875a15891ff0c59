"""Bill endpoints for the API."""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.bill import schemas
from components.bill.models import BillStatus, BillType
from components.bill.repository import BillRepository
from components.core.init_db import get_db
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/bills",
    tags=["bills"],
    responses={404: {"description": "Not found"}},
)


@router.post("/", response_model=schemas.Bill, status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill: schemas.BillCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await BillRepository(db).create(current_user.id, bill)


@router.get("/", response_model=List[schemas.Bill])
async def read_bills(
    type: Optional[BillType] = Query(None, description="payable or receivable"),
    status: Optional[BillStatus] = Query(None, description="Filter by status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get bills by due date; pending bills past due are marked late first."""
    return await BillRepository(db).get_all(current_user.id, type=type, status=status)


@router.get("/{bill_id}", response_model=schemas.Bill)
async def read_bill(
    bill_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await BillRepository(db).get_or_raise(current_user.id, bill_id)


@router.put("/{bill_id}", response_model=schemas.Bill)
async def update_bill(
    bill_id: int,
    bill: schemas.BillUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return await BillRepository(db).update(current_user.id, bill_id, bill)


@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bill(
    bill_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    await BillRepository(db).delete(current_user.id, bill_id)
