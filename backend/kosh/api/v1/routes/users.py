"""User profile endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser, CurrentUser
from kosh.db.session import get_db
from kosh.schemas.user import UserMe, UserProfile, UserProfileUpdate
from kosh.services.user_service import UserService

router = APIRouter()


@router.get("/me", response_model=UserMe)
async def read_me(current_user: CurrentUser):
    """Profile of the token holder."""
    return current_user


@router.get("/profile", response_model=UserProfile)
async def read_profile(user: ActingUser):
    return user


@router.put("/profile", response_model=UserProfile)
async def update_profile(
    data: UserProfileUpdate,
    user: ActingUser,
    db: AsyncSession = Depends(get_db)
):
    """Update name and phone number of the acting user."""
    service = UserService(db)
    return await service.update_profile(user, data)
