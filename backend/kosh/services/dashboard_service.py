"""
Dashboard Service

Aggregates treasury, investment and ledger figures for the home screen.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.money import ZERO, quantize_money
from kosh.db.base import utcnow
from kosh.models.treasury import EntryKind, TreasuryEntry
from kosh.services.investment_service import InvestmentService
from kosh.services.treasury_service import TreasuryService
from kosh.services.user_service import UserService

RECENT_ACTIVITY_LIMIT = 10


def month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


@dataclass
class DashboardSnapshot:
    treasury_balance: Decimal
    invested_amount: Decimal
    current_value: Decimal
    savings_this_month: Decimal
    recent_activity: List[TreasuryEntry]


class DashboardService:
    """Service for dashboard aggregates."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def saved_since(self, user_id: int, since: Optional[datetime] = None) -> Decimal:
        """Sum of auto-saved amounts, optionally only from a point in time."""
        query = select(func.coalesce(func.sum(TreasuryEntry.amount), 0)).where(
            TreasuryEntry.user_id == user_id,
            TreasuryEntry.kind == EntryKind.SAVE,
        )
        if since is not None:
            query = query.where(TreasuryEntry.created_at >= since)
        result = await self.db.execute(query)
        return quantize_money(Decimal(str(result.scalar_one())))

    async def recent_activity(self, user_id: int, limit: int = RECENT_ACTIVITY_LIMIT) -> List[TreasuryEntry]:
        result = await self.db.execute(
            select(TreasuryEntry)
            .where(TreasuryEntry.user_id == user_id)
            .order_by(TreasuryEntry.created_at.desc(), TreasuryEntry.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def snapshot(self, user_id: int, now: Optional[datetime] = None) -> DashboardSnapshot:
        """Build the dashboard figures for a user as of `now` (UTC)."""
        now = now or utcnow()
        investments = InvestmentService(self.db)
        positions = await investments.get_positions(user_id)
        return DashboardSnapshot(
            treasury_balance=await TreasuryService(self.db).get_balance(user_id),
            invested_amount=await investments.invested_amount(user_id),
            current_value=sum((p.current_value for p in positions), ZERO),
            savings_this_month=await self.saved_since(user_id, month_start(now)),
            recent_activity=await self.recent_activity(user_id),
        )

    async def user_count(self) -> int:
        return await UserService(self.db).count()
