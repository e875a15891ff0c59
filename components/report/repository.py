"""Repository for aggregated reports."""

from datetime import date
from decimal import Decimal
from typing import List, Optional

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from components.category.repository import CategoryRepository
from components.core.money import percent_of, to_money
from components.report import schemas
from components.transaction.models import TransactionType
from components.transaction.repository import TransactionRepository

INCOME = TransactionType.INCOME.value
EXPENSE = TransactionType.EXPENSE.value


def _cents(amount) -> int:
    return int(to_money(amount) * 100)


def _money(cents) -> Decimal:
    return to_money(Decimal(int(cents)) / 100)


class ReportRepository:
    """Repository for income/expense reports."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.transactions = TransactionRepository(session)

    async def get_year_summary(self, owner_id: int, year: int) -> schemas.YearSummary:
        """
        Get income, expense and net for every month of a year.

        Months without transactions are reported with zeros.
        """
        transactions = await self.transactions.get_all(
            owner_id,
            date_from=date(year, 1, 1),
            date_to=date(year, 12, 31),
        )
        frame = pd.DataFrame(
            [
                {"month": t.date.month, "type": TransactionType(t.type).value, "cents": _cents(t.amount)}
                for t in transactions
            ],
            columns=["month", "type", "cents"],
        )
        totals = (
            frame.pivot_table(index="month", columns="type", values="cents", aggfunc="sum", fill_value=0)
            if not frame.empty
            else pd.DataFrame()
        )
        totals = totals.reindex(index=range(1, 13), columns=[INCOME, EXPENSE], fill_value=0)

        monthly_summaries = []
        for month in range(1, 13):
            income = _money(totals.at[month, INCOME])
            expense = _money(totals.at[month, EXPENSE])
            monthly_summaries.append(schemas.MonthSummary(
                month=month,
                year=year,
                income=income,
                expense=expense,
                net=income - expense,
            ))

        total_income = _money(totals[INCOME].sum())
        total_expense = _money(totals[EXPENSE].sum())
        return schemas.YearSummary(
            year=year,
            total_income=total_income,
            total_expense=total_expense,
            net=total_income - total_expense,
            monthly_summaries=monthly_summaries,
        )

    async def get_category_breakdown(
        self,
        owner_id: int,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[schemas.CategoryTotal]:
        """Expense totals per category, largest first, with share of all expenses."""
        expenses = await self.transactions.get_all(
            owner_id,
            type=TransactionType.EXPENSE,
            date_from=date_from,
            date_to=date_to,
        )
        if not expenses:
            return []

        frame = pd.DataFrame(
            [{"category_id": t.category_id, "cents": _cents(t.amount)} for t in expenses]
        )
        per_category = frame.groupby("category_id")["cents"].sum().sort_values(ascending=False)
        grand_total = int(per_category.sum())

        names = {c.id: c.name for c in await CategoryRepository(self.session).get_all(owner_id)}
        return [
            schemas.CategoryTotal(
                category_id=int(category_id),
                category_name=names.get(int(category_id), f"Category {category_id}"),
                total=_money(cents),
                share_percentage=percent_of(Decimal(int(cents)), Decimal(grand_total)),
            )
            for category_id, cents in per_category.items()
        ]
