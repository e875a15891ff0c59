"""Repository for bill operations."""

from datetime import date
from typing import List, Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.bill.models import Bill, BillStatus, BillType
from components.bill.schemas import BillCreate, BillUpdate
from components.category.repository import CategoryRepository
from components.core.exceptions import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

SETTLED_STATUS = {
    BillType.PAYABLE: BillStatus.PAID,
    BillType.RECEIVABLE: BillStatus.RECEIVED,
}


class BillRepository:
    """Repository for bill operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.categories = CategoryRepository(session)

    def _check_status(self, bill_type: BillType, status: BillStatus) -> None:
        settled = {BillStatus.PAID, BillStatus.RECEIVED}
        if status in settled and status is not SETTLED_STATUS[BillType(bill_type)]:
            raise ValidationError(f"A {BillType(bill_type).value} bill cannot be {status.value}")

    async def create(self, owner_id: int, bill: BillCreate) -> Bill:
        await self.categories.get_or_raise(owner_id, bill.category_id)
        self._check_status(bill.type, bill.status)
        db_bill = Bill(user_id=owner_id, **bill.model_dump())
        self.session.add(db_bill)
        await self.session.commit()
        await self.session.refresh(db_bill)
        return db_bill

    async def get(self, owner_id: int, bill_id: int) -> Optional[Bill]:
        result = await self.session.execute(
            select(Bill).where(Bill.id == bill_id, Bill.user_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def get_or_raise(self, owner_id: int, bill_id: int) -> Bill:
        bill = await self.get(owner_id, bill_id)
        if bill is None:
            raise NotFoundError("Bill", bill_id)
        return bill

    async def mark_late(self, owner_id: int, today: Optional[date] = None) -> int:
        """Flag pending bills past their due date as late; returns how many changed."""
        today = today or date.today()
        result = await self.session.execute(
            update(Bill)
            .where(
                Bill.user_id == owner_id,
                Bill.status == BillStatus.PENDING,
                Bill.due_date < today,
            )
            .values(status=BillStatus.LATE)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        if result.rowcount:
            logger.info("bills_marked_late", owner_id=owner_id, count=result.rowcount)
        return result.rowcount

    async def get_all(
        self,
        owner_id: int,
        type: Optional[BillType] = None,
        status: Optional[BillStatus] = None,
        today: Optional[date] = None,
    ) -> List[Bill]:
        """Get bills ordered by due date, after refreshing late status."""
        await self.mark_late(owner_id, today)
        query = select(Bill).where(Bill.user_id == owner_id)
        if type is not None:
            query = query.where(Bill.type == type)
        if status is not None:
            query = query.where(Bill.status == status)
        query = query.order_by(Bill.due_date.asc(), Bill.id.asc()).execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update(self, owner_id: int, bill_id: int, bill: BillUpdate) -> Bill:
        db_bill = await self.get_or_raise(owner_id, bill_id)
        changes = bill.model_dump(exclude_none=True)
        if "category_id" in changes:
            await self.categories.get_or_raise(owner_id, changes["category_id"])
        if "status" in changes:
            self._check_status(db_bill.type, changes["status"])
        for name, value in changes.items():
            setattr(db_bill, name, value)
        await self.session.commit()
        await self.session.refresh(db_bill)
        return db_bill

    async def delete(self, owner_id: int, bill_id: int) -> None:
        db_bill = await self.get_or_raise(owner_id, bill_id)
        await self.session.delete(db_bill)
        await self.session.commit()
