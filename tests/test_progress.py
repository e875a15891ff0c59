import asyncio
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from components.budget.models import BudgetPeriod
from components.budget.progress import budget_progress, budget_status, period_bounds
from components.budget.repository import BudgetRepository
from components.budget.schemas import BudgetCreate, BudgetStatus
from components.core.exceptions import NotFoundError
from components.goal.progress import goal_progress, remaining_days
from components.goal.repository import GoalRepository
from components.goal.schemas import GoalCreate, GoalStatus
from components.transaction.models import TransactionType
from components.transaction.schemas import TransactionCreate
from components.transaction.service import TransactionService

TODAY = date(2024, 5, 15)
NOON = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)


def budget(limit="100.00", period=BudgetPeriod.MONTHLY, category_id=1):
    return SimpleNamespace(id=1, category_id=category_id, amount=Decimal(limit), period=period)


def expense(amount, day=TODAY, category_id=1, type=TransactionType.EXPENSE):
    return SimpleNamespace(amount=Decimal(amount), date=day, category_id=category_id, type=type)


def goal(current, target="100.00", target_date=TODAY):
    return SimpleNamespace(
        id=1,
        current_amount=Decimal(current),
        target_amount=Decimal(target),
        target_date=target_date,
    )


def test_period_bounds():
    assert period_bounds(BudgetPeriod.MONTHLY, TODAY) == (date(2024, 5, 1), date(2024, 5, 31))
    assert period_bounds(BudgetPeriod.MONTHLY, date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert period_bounds(BudgetPeriod.MONTHLY, date(2024, 12, 31)) == (date(2024, 12, 1), date(2024, 12, 31))
    assert period_bounds(BudgetPeriod.YEARLY, TODAY) == (date(2024, 1, 1), date(2024, 12, 31))


@pytest.mark.parametrize(
    "spent, status",
    [
        ("0.00", BudgetStatus.NOMINAL),
        ("74.49", BudgetStatus.NOMINAL),
        ("74.50", BudgetStatus.WARNING),
        ("74.99", BudgetStatus.WARNING),
        ("75.00", BudgetStatus.WARNING),
        ("99.99", BudgetStatus.WARNING),
        ("100.00", BudgetStatus.EXCEEDED),
        ("250.00", BudgetStatus.EXCEEDED),
    ],
)
def test_budget_status_bands(spent, status):
    assert budget_status(Decimal(spent), Decimal("100.00")) is status


def test_budget_without_expenses():
    progress = budget_progress(budget(), [], TODAY)

    assert progress.spent == Decimal("0.00")
    assert progress.pct == 0
    assert progress.status is BudgetStatus.NOMINAL


def test_budget_exactly_at_limit_is_exceeded():
    progress = budget_progress(budget(), [expense("60.00"), expense("40.00")], TODAY)

    assert progress.spent == Decimal("100.00")
    assert progress.pct == 100
    assert progress.status is BudgetStatus.EXCEEDED


def test_budget_percentage_is_capped():
    progress = budget_progress(budget(), [expense("180.00")], TODAY)

    assert progress.pct == 100
    assert progress.status is BudgetStatus.EXCEEDED


def test_budget_percentage_rounds_half_up():
    progress = budget_progress(budget("200.00"), [expense("1.00")], TODAY)

    assert progress.pct == 1


def test_budget_counts_only_matching_expenses_in_period():
    transactions = [
        expense("30.00"),
        expense("500.00", type=TransactionType.INCOME),
        expense("500.00", category_id=2),
        expense("500.00", day=date(2024, 4, 30)),
        expense("10.00", day=date(2024, 5, 31)),
    ]

    progress = budget_progress(budget(), transactions, TODAY)

    assert progress.spent == Decimal("40.00")
    assert progress.pct == 40
    assert progress.status is BudgetStatus.NOMINAL


def test_yearly_budget_spans_the_year():
    transactions = [expense("30.00", day=date(2024, 1, 2)), expense("50.00"), expense("99.00", day=date(2023, 12, 31))]

    progress = budget_progress(budget(period=BudgetPeriod.YEARLY), transactions, TODAY)

    assert progress.spent == Decimal("80.00")
    assert progress.status is BudgetStatus.WARNING


def test_goal_percentages():
    assert goal_progress(goal("0.00"), NOON).pct == 0
    assert goal_progress(goal("33.50"), NOON).pct == 34
    assert goal_progress(goal("100.00"), NOON).pct == 100
    assert goal_progress(goal("150.00"), NOON).pct == 100


def test_remaining_days():
    assert remaining_days(date(2024, 5, 16), NOON) == 1
    assert remaining_days(date(2024, 5, 25), NOON) == 10
    assert remaining_days(date(2024, 5, 15), NOON) == 0
    assert remaining_days(date(2024, 5, 14), NOON) == -1
    assert remaining_days(date(2024, 5, 15), datetime(2024, 5, 15, 0, 0, tzinfo=timezone.utc)) == 0


def test_goal_status():
    assert goal_progress(goal("10", target_date=date(2024, 6, 1)), NOON).status is GoalStatus.COUNTDOWN
    assert goal_progress(goal("10", target_date=TODAY), NOON).status is GoalStatus.DUE_TODAY
    assert goal_progress(goal("10", target_date=date(2024, 5, 1)), NOON).status is GoalStatus.EXPIRED


@pytest.mark.asyncio
async def test_budget_progress_from_stored_transactions(session, settings, owner, checking, category, make_category):
    other = await make_category(owner, "Other")
    service = TransactionService(session, settings)
    for amount, category_id, day in [
        ("50.00", category, TODAY),
        ("30.00", category, date(2024, 5, 1)),
        ("70.00", other, TODAY),
        ("90.00", category, date(2024, 4, 30)),
    ]:
        await service.create(owner, TransactionCreate(
            title="Shopping",
            amount=Decimal(amount),
            type=TransactionType.EXPENSE,
            category_id=category_id,
            account_id=checking,
            date=day,
        ))
    repo = BudgetRepository(session)
    created = await repo.create(
        owner, BudgetCreate(category_id=category, amount=Decimal("100.00"), period=BudgetPeriod.MONTHLY)
    )

    progress = await repo.progress(owner, created.id, today=TODAY)

    assert progress.spent == Decimal("80.00")
    assert progress.pct == 80
    assert progress.status is BudgetStatus.WARNING


@pytest.mark.asyncio
async def test_goal_contribution_and_progress(session, owner):
    repo = GoalRepository(session)
    created = await repo.create(owner, GoalCreate(
        title="Bike",
        target_amount=Decimal("400.00"),
        current_amount=Decimal("100.00"),
        target_date=date(2024, 5, 20),
    ))

    updated = await repo.contribute(owner, created.id, Decimal("50.00"))
    progress = await repo.progress(owner, created.id, now=NOON)

    assert updated.current_amount == Decimal("150.00")
    assert progress.pct == 38
    assert progress.remaining_days == 5
    assert progress.status is GoalStatus.COUNTDOWN


@pytest.mark.asyncio
async def test_concurrent_contributions_are_not_lost(database, session, owner):
    created = await GoalRepository(session).create(owner, GoalCreate(
        title="Bike",
        target_amount=Decimal("400.00"),
        current_amount=Decimal("100.00"),
        target_date=date(2024, 5, 20),
    ))
    goal_id = created.id

    async def contribute(amount):
        async with database.get_db() as other:
            await GoalRepository(other).contribute(owner, goal_id, Decimal(amount))

    await asyncio.gather(contribute("50.00"), contribute("25.00"))

    stored = await GoalRepository(session).get_or_raise(owner, goal_id)
    await session.refresh(stored)
    assert stored.current_amount == Decimal("175.00")


@pytest.mark.asyncio
async def test_contribution_to_foreign_goal_is_not_found(session, owner, other_owner):
    created = await GoalRepository(session).create(owner, GoalCreate(
        title="Bike",
        target_amount=Decimal("400.00"),
        current_amount=Decimal("100.00"),
        target_date=date(2024, 5, 20),
    ))
    goal_id = created.id

    with pytest.raises(NotFoundError):
        await GoalRepository(session).contribute(other_owner, goal_id, Decimal("50.00"))
    stored = await GoalRepository(session).get_or_raise(owner, goal_id)
    assert stored.current_amount == Decimal("100.00")
