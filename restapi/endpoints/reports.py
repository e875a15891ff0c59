"""Report endpoints for the API."""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.report import schemas
from components.report.repository import ReportRepository
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/reports",
    tags=["reports"],
)


@router.get("/year-summary", response_model=schemas.YearSummary)
async def get_year_summary(
    year: int = Query(..., description="Year to analyze"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Get income, expense and net for each month of a year.

    Returns monthly summaries with:
    - Month and year
    - Total income
    - Total expense
    - Net (income minus expense)
    """
    return await ReportRepository(db).get_year_summary(current_user.id, year)


@router.get("/categories", response_model=List[schemas.CategoryTotal])
async def get_category_breakdown(
    date_from: Optional[date] = Query(None, description="Expenses on or after this date"),
    date_to: Optional[date] = Query(None, description="Expenses on or before this date"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get expense totals per category, largest first."""
    return await ReportRepository(db).get_category_breakdown(current_user.id, date_from, date_to)
