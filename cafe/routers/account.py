from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import auth_service, get_current_user, get_db
from ..models import User
from ..schemas.user_schema import ProfileUpdate, UserResponse


router = APIRouter()


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    """Profile of the signed-in user"""
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Update name and phone. These are used as the default contact details for
    pickup and delivery orders.
    """
    return await auth_service.update_user_profile(current_user, data.model_dump(exclude_unset=True), db)
