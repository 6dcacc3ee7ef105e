"""Pydantic schemas for liveness checks."""
from typing import Optional

from kosh.schemas.base import ApiModel, UtcDatetime


class HealthOut(ApiModel):
    status: str = "ok"
    service: str
    time: Optional[UtcDatetime] = None
