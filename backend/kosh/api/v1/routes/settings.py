"""Savings settings endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser
from kosh.db.session import get_db
from kosh.schemas.settings import SettingsOut, SettingsUpdate, SettingsUpdateResponse
from kosh.services.settings_service import SettingsService

router = APIRouter()


@router.get("", response_model=None)
async def read_settings(user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Settings of the acting user, or an empty object when none exist."""
    service = SettingsService(db)
    row = await service.get_for_user(user.id)
    return SettingsOut.model_validate(row) if row else {}


@router.post("", response_model=SettingsUpdateResponse)
@router.put("", response_model=SettingsUpdateResponse)
async def update_settings(
    data: SettingsUpdate,
    user: ActingUser,
    db: AsyncSession = Depends(get_db)
):
    """
    Partially update settings.

    `autoSaveRate` is clamped into [0, 100]; negative `weeklyTopUp` and
    `minThreshold` values are ignored.
    """
    service = SettingsService(db)
    row = await service.update(user.id, data)
    return SettingsUpdateResponse(settings=SettingsOut.model_validate(row))
