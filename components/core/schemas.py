"""Core schemas for the application."""

from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field


class HealthCheck(BaseModel):
    """Schema for health check response."""
    service_name: str
    status: str


class ErrorResponse(BaseModel):
    """Schema for ledger error responses."""
    code: str
    detail: str
    account_id: Optional[int] = None
    balance: Optional[str] = None
    completed_steps: Optional[List[str]] = None
    account_ids: Optional[List[int]] = None


Money = Annotated[Decimal, Field(max_digits=12, decimal_places=2)]
PositiveMoney = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
NonNegativeMoney = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
