"""Pydantic schemas for category data validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryBase(BaseModel):
    """Base category schema."""
    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field("#6b7280", max_length=20)
    icon: str = Field("", max_length=20)


class CategoryCreate(CategoryBase):
    """Schema for category creation."""
    pass


class CategoryUpdate(BaseModel):
    """Schema for category update."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=20)
    icon: Optional[str] = Field(None, max_length=20)


class Category(CategoryBase):
    """Schema for category response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
