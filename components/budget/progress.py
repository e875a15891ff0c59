"""Budget consumption for the period containing a given day."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from components.budget.models import Budget, BudgetPeriod
from components.budget.schemas import BudgetProgress, BudgetStatus
from components.core.money import percent_of, to_money
from components.transaction.models import TransactionType

WARNING_PCT = 75


def period_bounds(period: BudgetPeriod, today: date) -> Tuple[date, date]:
    """First and last day of the month or year containing ``today``."""
    if BudgetPeriod(period) is BudgetPeriod.YEARLY:
        return date(today.year, 1, 1), date(today.year, 12, 31)
    start = date(today.year, today.month, 1)
    next_month = date(today.year + 1, 1, 1) if today.month == 12 else date(today.year, today.month + 1, 1)
    return start, date.fromordinal(next_month.toordinal() - 1)


def budget_status(spent: Decimal, limit: Decimal) -> BudgetStatus:
    # Exceeded uses the exact amounts so one cent under the limit is still a warning
    if spent >= limit:
        return BudgetStatus.EXCEEDED
    if percent_of(spent, limit) >= WARNING_PCT:
        return BudgetStatus.WARNING
    return BudgetStatus.NOMINAL


def budget_progress(budget: Budget, transactions: Iterable, today: Optional[date] = None) -> BudgetProgress:
    """
    Sum the expenses of the budget's category within the current period.

    ``transactions`` may hold anything; only expenses in the category and
    period are counted.
    """
    today = today or date.today()
    start, end = period_bounds(budget.period, today)
    spent = sum(
        (
            Decimal(t.amount)
            for t in transactions
            if TransactionType(t.type) is TransactionType.EXPENSE
            and t.category_id == budget.category_id
            and start <= t.date <= end
        ),
        Decimal("0"),
    )
    spent = to_money(spent)
    limit = to_money(budget.amount)
    return BudgetProgress(
        budget_id=budget.id,
        category_id=budget.category_id,
        spent=spent,
        limit=limit,
        pct=percent_of(spent, limit),
        status=budget_status(spent, limit),
    )
