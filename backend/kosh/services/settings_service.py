"""
Settings Service

Reads and updates a user's auto-save rules.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.logging import get_logger
from kosh.core.money import ZERO, clamp, to_decimal
from kosh.core.settings import settings
from kosh.models.settings import UserSettings
from kosh.schemas.settings import SettingsUpdate

logger = get_logger(__name__)

MAX_RATE = Decimal("100")


def default_settings(user_id: int) -> UserSettings:
    """Settings row populated with the configured defaults."""
    return UserSettings(
        user_id=user_id,
        auto_save_rate=settings.demo.AUTO_SAVE_RATE,
        weekly_top_up=settings.demo.WEEKLY_TOP_UP,
        min_threshold=settings.demo.MIN_THRESHOLD,
        round_ups_enabled=settings.demo.ROUND_UPS_ENABLED,
    )


class SettingsService:
    """Service for a user's savings settings."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def get_for_user(self, user_id: int) -> Optional[UserSettings]:
        result = await self.db.execute(
            select(UserSettings).where(UserSettings.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def update(self, user_id: int, data: SettingsUpdate) -> UserSettings:
        """
        Apply a partial update, creating the row with defaults if missing.

        The rate is clamped into [0, 100]; negative top-up or threshold
        values are ignored.

        Args:
            user_id: Owner of the settings
            data: Fields to change

        Returns:
            UserSettings: The stored settings
        """
        row = await self.get_for_user(user_id)
        if row is None:
            row = default_settings(user_id)
            self.db.add(row)

        rate = to_decimal(data.auto_save_rate)
        if rate is not None:
            row.auto_save_rate = clamp(rate, ZERO, MAX_RATE)

        weekly_top_up = to_decimal(data.weekly_top_up)
        if weekly_top_up is not None and weekly_top_up >= ZERO:
            row.weekly_top_up = weekly_top_up

        min_threshold = to_decimal(data.min_threshold)
        if min_threshold is not None and min_threshold >= ZERO:
            row.min_threshold = min_threshold

        if data.round_ups_enabled is not None:
            row.round_ups_enabled = data.round_ups_enabled

        await self.db.commit()
        await self.db.refresh(row)

        logger.info(
            "Settings updated",
            extra={
                "user_id": user_id,
                "auto_save_rate": str(row.auto_save_rate),
                "min_threshold": str(row.min_threshold),
            }
        )
        return row
