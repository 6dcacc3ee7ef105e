"""Pydantic schemas for savings settings."""
from decimal import Decimal
from typing import Optional

from kosh.schemas.base import ApiModel, OkResponse, UtcDatetime


class SettingsOut(ApiModel):
    id: int
    user_id: int
    auto_save_rate: float
    weekly_top_up: float
    min_threshold: float
    round_ups_enabled: bool
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SettingsUpdate(ApiModel):
    """
    Partial settings update.

    Out-of-range rates are clamped and negative amounts ignored by the
    service rather than rejected here.
    """

    auto_save_rate: Optional[Decimal] = None
    weekly_top_up: Optional[Decimal] = None
    min_threshold: Optional[Decimal] = None
    round_ups_enabled: Optional[bool] = None


class SettingsUpdateResponse(OkResponse):
    settings: SettingsOut
