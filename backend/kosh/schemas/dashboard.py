"""Pydantic schemas for the dashboard and analytics views."""
from typing import List, Optional

from kosh.schemas.base import ApiModel, UtcDatetime
from kosh.schemas.transaction import TransactionOut


class ActivityItem(ApiModel):
    type: str
    amount: float
    description: Optional[str] = None
    time: UtcDatetime


class DashboardOut(ApiModel):
    treasury_balance: float
    invested_amount: float
    current_value: float
    savings_this_month: float
    recent_activity: List[ActivityItem]


class DashboardSummary(ApiModel):
    users: int


class MonthlySavings(ApiModel):
    month: str
    amount: float
    projected_amount: Optional[float] = None


class DistributionSlice(ApiModel):
    name: str
    value: float
    percentage: float


class TrendPoint(ApiModel):
    date: str
    amount: float


class AnalyticsOut(ApiModel):
    total_credited: float
    total_saved: float
    total_invested: float
    monthly_savings: List[MonthlySavings]
    investment_distribution: List[DistributionSlice]
    savings_trend: List[TrendPoint]
    recent_transactions: List[TransactionOut]
