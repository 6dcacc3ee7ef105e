"""
Investment Schemas

Pydantic models for investing treasury funds into the mock funds,
liquidating positions and moving NAVs.
"""

from typing import Any, List

from kosh.models.investment import RiskLevel
from kosh.schemas.base import ApiModel, OkResponse, UtcDatetime


class InvestRequest(ApiModel):
    """Schema for moving treasury funds into a fund."""
    amount: Any = None
    risk: RiskLevel = RiskLevel.LOW


class LiquidateRequest(ApiModel):
    """Schema for returning invested funds to the treasury."""
    amount: Any = None


class GrowRequest(ApiModel):
    """Schema for moving a fund's NAV by a percentage."""
    risk: RiskLevel = RiskLevel.LOW
    rate_pct: Any = None


class PositionOut(ApiModel):
    """Position valued at the current NAV."""
    id: int
    fund_name: str
    risk: RiskLevel
    units: float
    investment_amount: float
    nav: float
    nav_at_invest: float
    current_value: float
    date: UtcDatetime


class BalancesResponse(OkResponse):
    invested_amount: float
    treasury_balance: float


class NavOut(ApiModel):
    risk: RiskLevel
    current_nav: float


class GrowResponse(OkResponse):
    navs: List[NavOut]
