"""Analytics endpoint."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser
from kosh.db.session import get_db
from kosh.schemas.dashboard import AnalyticsOut, DistributionSlice, MonthlySavings, TrendPoint
from kosh.schemas.transaction import TransactionOut
from kosh.services.analytics_service import AnalyticsRange, AnalyticsService

router = APIRouter()


@router.get("", response_model=AnalyticsOut, response_model_exclude_none=True)
async def read_analytics(
    user: ActingUser,
    period: AnalyticsRange = Query(default=AnalyticsRange.MONTH, alias="range"),
    db: AsyncSession = Depends(get_db)
):
    """Savings, distribution and cash-flow figures for the chosen range."""
    service = AnalyticsService(db)
    report = await service.report(user.id, period)
    return AnalyticsOut(
        total_credited=report.total_credited,
        total_saved=report.total_saved,
        total_invested=report.total_invested,
        monthly_savings=[
            MonthlySavings(
                month=item.month,
                amount=item.amount,
                projected_amount=item.projected_amount,
            )
            for item in report.monthly_savings
        ],
        investment_distribution=[
            DistributionSlice(name=item.name, value=item.value, percentage=item.percentage)
            for item in report.investment_distribution
        ],
        savings_trend=[TrendPoint(**point) for point in report.savings_trend],
        recent_transactions=[TransactionOut.from_row(tx) for tx in report.recent_transactions],
    )
