from datetime import date
from decimal import Decimal

import pytest

from components.bill.models import BillStatus, BillType
from components.bill.repository import BillRepository
from components.bill.schemas import BillCreate, BillUpdate
from components.category.repository import CategoryRepository
from components.core.exceptions import NotFoundError, ValidationError
from components.report.repository import ReportRepository
from components.transaction.models import TransactionType
from components.transaction.schemas import TransactionCreate
from components.transaction.service import TransactionService

TODAY = date(2024, 5, 15)


def bill_data(category_id, due_date, type=BillType.PAYABLE, amount="120.00", **extra):
    return BillCreate(
        type=type,
        description="Electricity",
        category_id=category_id,
        amount=Decimal(amount),
        due_date=due_date,
        **extra,
    )


@pytest.mark.asyncio
async def test_overdue_pending_bills_are_marked_late(session, owner, category):
    repo = BillRepository(session)
    overdue = await repo.create(owner, bill_data(category, date(2024, 5, 10)))
    overdue_id = overdue.id
    await repo.create(owner, bill_data(category, date(2024, 5, 20)))
    await repo.create(owner, bill_data(category, date(2024, 5, 1), status=BillStatus.PAID))

    bills = await repo.get_all(owner, today=TODAY)

    assert [b.due_date for b in bills] == [date(2024, 5, 1), date(2024, 5, 10), date(2024, 5, 20)]
    assert {b.id: b.status for b in bills}[overdue_id] is BillStatus.LATE
    assert [b.status for b in bills] == [BillStatus.PAID, BillStatus.LATE, BillStatus.PENDING]
    assert len(await repo.get_all(owner, status=BillStatus.LATE, today=TODAY)) == 1


@pytest.mark.asyncio
async def test_bill_due_today_is_not_late(session, owner, category):
    repo = BillRepository(session)
    await repo.create(owner, bill_data(category, TODAY))

    assert await repo.mark_late(owner, today=TODAY) == 0


@pytest.mark.asyncio
async def test_settled_status_must_match_bill_type(session, owner, category):
    repo = BillRepository(session)

    with pytest.raises(ValidationError):
        await repo.create(owner, bill_data(category, TODAY, status=BillStatus.RECEIVED))

    receivable = await repo.create(owner, bill_data(category, TODAY, type=BillType.RECEIVABLE))
    with pytest.raises(ValidationError):
        await repo.update(owner, receivable.id, BillUpdate(status=BillStatus.PAID))

    updated = await repo.update(owner, receivable.id, BillUpdate(status=BillStatus.RECEIVED))
    assert updated.status is BillStatus.RECEIVED


@pytest.mark.asyncio
async def test_bills_are_scoped_to_owner(session, owner, other_owner, category):
    repo = BillRepository(session)
    created = await repo.create(owner, bill_data(category, TODAY))

    with pytest.raises(NotFoundError):
        await repo.get_or_raise(other_owner, created.id)
    with pytest.raises(NotFoundError):
        await repo.create(other_owner, bill_data(category, TODAY))


@pytest.mark.asyncio
async def test_category_in_use_cannot_be_deleted(session, owner, category, make_category):
    await BillRepository(session).create(owner, bill_data(category, TODAY))
    unused = await make_category(owner, "Unused")
    categories = CategoryRepository(session)

    with pytest.raises(ValidationError):
        await categories.delete(owner, category)
    await categories.delete(owner, unused)
    assert await categories.get(owner, unused) is None


async def book(service, owner_id, account_id, category_id, amount, type_, day):
    await service.create(owner_id, TransactionCreate(
        title="Entry",
        amount=Decimal(amount),
        type=type_,
        category_id=category_id,
        account_id=account_id,
        date=day,
    ))


@pytest.mark.asyncio
async def test_year_summary(session, settings, owner, checking, category):
    service = TransactionService(session, settings)
    await book(service, owner, checking, category, "2000.00", TransactionType.INCOME, date(2024, 1, 31))
    await book(service, owner, checking, category, "150.25", TransactionType.EXPENSE, date(2024, 1, 3))
    await book(service, owner, checking, category, "49.75", TransactionType.EXPENSE, date(2024, 3, 9))
    await book(service, owner, checking, category, "999.00", TransactionType.EXPENSE, date(2023, 12, 31))

    summary = await ReportRepository(session).get_year_summary(owner, 2024)

    assert len(summary.monthly_summaries) == 12
    january, february, march = summary.monthly_summaries[:3]
    assert (january.income, january.expense, january.net) == (Decimal("2000.00"), Decimal("150.25"), Decimal("1849.75"))
    assert (february.income, february.expense) == (Decimal("0.00"), Decimal("0.00"))
    assert march.expense == Decimal("49.75")
    assert summary.total_income == Decimal("2000.00")
    assert summary.total_expense == Decimal("200.00")
    assert summary.net == Decimal("1800.00")


@pytest.mark.asyncio
async def test_year_summary_without_transactions(session, owner):
    summary = await ReportRepository(session).get_year_summary(owner, 2024)

    assert summary.total_income == Decimal("0.00")
    assert all(m.net == 0 for m in summary.monthly_summaries)


@pytest.mark.asyncio
async def test_category_breakdown(session, settings, owner, checking, category, make_category):
    food = await make_category(owner, "Food")
    service = TransactionService(session, settings)
    await book(service, owner, checking, category, "25.00", TransactionType.EXPENSE, TODAY)
    await book(service, owner, checking, food, "50.00", TransactionType.EXPENSE, TODAY)
    await book(service, owner, checking, food, "25.00", TransactionType.EXPENSE, TODAY)
    await book(service, owner, checking, food, "500.00", TransactionType.INCOME, TODAY)

    totals = await ReportRepository(session).get_category_breakdown(owner)

    assert [(t.category_name, t.total, t.share_percentage) for t in totals] == [
        ("Food", Decimal("75.00"), 75),
        ("General", Decimal("25.00"), 25),
    ]
    assert await ReportRepository(session).get_category_breakdown(owner, date_from=date(2025, 1, 1)) == []
