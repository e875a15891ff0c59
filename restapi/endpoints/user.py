"""Profile endpoints for the current user."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.user.repository import UserRepository
from components.user import schemas
from restapi.endpoints.auth import get_current_user
from components.user.models import User

router = APIRouter(
    prefix="/users",
    tags=["users"],
    responses={404: {"description": "Not found"}},
)


@router.get("/me", response_model=schemas.User)
async def read_profile(current_user: User = Depends(get_current_user)):
    """Get the profile of the current user."""
    return current_user


@router.put("/me", response_model=schemas.User)
async def update_profile(
    user: schemas.UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update name or password of the current user."""
    updated_user = await UserRepository(db).update(current_user.id, user)
    if updated_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return updated_user
