"""Pydantic schemas for user data validation."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    """Base user schema."""
    login: str = Field(..., min_length=3, max_length=50)
    name: str = Field("", max_length=100)


class UserCreate(UserBase):
    """Schema for user registration."""
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    """Schema for profile update."""
    name: Optional[str] = Field(None, max_length=100)
    password: Optional[str] = Field(None, min_length=6)


class User(UserBase):
    """Schema for user response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    registration_date: date


class UserWithToken(User):
    """Schema for user response with access token."""
    access_token: str
    token_type: str = "bearer"
