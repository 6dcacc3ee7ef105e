"""
Analytics Service

Savings and cash-flow figures for the analytics screen: monthly savings
with a projection for the running month, the split of invested money per
fund, and a day-by-day cumulative net cash-flow trend.
"""

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.money import ZERO, quantize_money, round_whole
from kosh.db.base import as_utc, utcnow
from kosh.models.investment import InvestmentPosition, RiskLevel
from kosh.models.transaction import Transaction, TransactionType
from kosh.models.treasury import EntryKind, TreasuryEntry
from kosh.services.dashboard_service import DashboardService
from kosh.services.investment_service import InvestmentService
from kosh.services.transaction_service import TransactionService

RECENT_TRANSACTIONS_LIMIT = 5
ONE_DECIMAL = Decimal("0.1")


class AnalyticsRange(str, Enum):
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def range_start(today: date, period: AnalyticsRange) -> date:
    if period is AnalyticsRange.WEEK:
        return today - timedelta(days=6)
    if period is AnalyticsRange.YEAR:
        return today.replace(month=1, day=1)
    return today.replace(day=1)


def trend_label(day: date) -> str:
    return f"{calendar.month_abbr[day.month]} {day.day}"


def project_month_total(amount: Decimal, today: date) -> Optional[Decimal]:
    """Straight-line projection of a month-to-date total; None on the last day."""
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    if today.day >= days_in_month:
        return None
    return round_whole(amount / today.day * days_in_month)


@dataclass
class MonthTotal:
    month: str
    amount: Decimal
    projected_amount: Optional[Decimal] = None


@dataclass
class Slice:
    name: str
    value: Decimal
    percentage: Decimal


@dataclass
class AnalyticsReport:
    total_credited: Decimal
    total_saved: Decimal
    total_invested: Decimal
    monthly_savings: List[MonthTotal] = field(default_factory=list)
    investment_distribution: List[Slice] = field(default_factory=list)
    savings_trend: List[Dict[str, object]] = field(default_factory=list)
    recent_transactions: List[Transaction] = field(default_factory=list)


class AnalyticsService:
    """Service computing analytics for one user."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def _transactions(self, user_id: int) -> List[Transaction]:
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.occurred_at, Transaction.id)
        )
        return list(result.scalars().all())

    async def _save_entries(self, user_id: int, since: datetime) -> List[TreasuryEntry]:
        result = await self.db.execute(
            select(TreasuryEntry).where(
                TreasuryEntry.user_id == user_id,
                TreasuryEntry.kind == EntryKind.SAVE,
                TreasuryEntry.created_at >= since,
            )
        )
        return list(result.scalars().all())

    async def monthly_savings(self, user_id: int, now: datetime) -> List[MonthTotal]:
        """
        Auto-saved totals for each month of the current year.

        The running month also carries a straight-line projection to month
        end, except on its last day.
        """
        year_start = now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
        totals: Dict[int, Decimal] = defaultdict(lambda: ZERO)
        for entry in await self._save_entries(user_id, year_start):
            totals[as_utc(entry.created_at).month] += Decimal(entry.amount)

        months = []
        for month in range(1, 13):
            item = MonthTotal(calendar.month_abbr[month], quantize_money(totals[month]))
            if month == now.month:
                item.projected_amount = project_month_total(item.amount, now.date())
            months.append(item)
        return months

    async def investment_distribution(self, user_id: int) -> List[Slice]:
        """Invested amount per fund with its share of the total (1 dp)."""
        result = await self.db.execute(
            select(InvestmentPosition.risk, InvestmentPosition.amount)
            .where(InvestmentPosition.user_id == user_id)
        )
        per_risk: Dict[RiskLevel, Decimal] = defaultdict(lambda: ZERO)
        for risk, amount in result.all():
            per_risk[risk] += Decimal(amount)

        total = sum(per_risk.values(), ZERO)
        slices = []
        for risk in RiskLevel:
            value = per_risk[risk]
            if value <= ZERO:
                continue
            percentage = (value / total * 100).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
            slices.append(Slice(risk.fund_name, quantize_money(value), percentage))
        return slices

    @staticmethod
    def savings_trend(
        transactions: List[Transaction],
        today: date,
        period: AnalyticsRange,
    ) -> List[Dict[str, object]]:
        """
        Cumulative net cash flow (credits minus debits) at the end of each
        day of the period, floored at zero. Transactions before the period
        count towards the opening figure.
        """
        start = range_start(today, period)
        daily: Dict[date, Decimal] = defaultdict(lambda: ZERO)
        opening = ZERO
        for tx in transactions:
            signed = Decimal(tx.amount) if tx.type == TransactionType.CREDIT else -Decimal(tx.amount)
            day = as_utc(tx.occurred_at).date()
            if day < start:
                opening += signed
            else:
                daily[day] += signed

        points = []
        running = opening
        day = start
        while day <= today:
            running += daily[day]
            points.append({"date": trend_label(day), "amount": max(ZERO, quantize_money(running))})
            day += timedelta(days=1)
        return points

    async def report(
        self,
        user_id: int,
        period: AnalyticsRange = AnalyticsRange.MONTH,
        now: Optional[datetime] = None,
    ) -> AnalyticsReport:
        """Build the full analytics report for a user as of `now` (UTC)."""
        now = as_utc(now or utcnow())
        transactions = await self._transactions(user_id)
        total_credited = sum(
            (Decimal(tx.amount) for tx in transactions if tx.type == TransactionType.CREDIT),
            ZERO,
        )
        return AnalyticsReport(
            total_credited=quantize_money(total_credited),
            total_saved=await DashboardService(self.db).saved_since(user_id),
            total_invested=await InvestmentService(self.db).invested_amount(user_id),
            monthly_savings=await self.monthly_savings(user_id, now),
            investment_distribution=await self.investment_distribution(user_id),
            savings_trend=self.savings_trend(transactions, now.date(), period),
            recent_transactions=await TransactionService(self.db).list_recent(
                user_id, limit=RECENT_TRANSACTIONS_LIMIT
            ),
        )
