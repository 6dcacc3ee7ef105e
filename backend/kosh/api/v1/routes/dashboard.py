"""Dashboard endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser
from kosh.db.session import get_db
from kosh.schemas.dashboard import ActivityItem, DashboardOut, DashboardSummary
from kosh.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=DashboardOut)
async def read_dashboard(user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Balances, this month's savings and the latest ledger activity."""
    service = DashboardService(db)
    snapshot = await service.snapshot(user.id)
    return DashboardOut(
        treasury_balance=snapshot.treasury_balance,
        invested_amount=snapshot.invested_amount,
        current_value=snapshot.current_value,
        savings_this_month=snapshot.savings_this_month,
        recent_activity=[
            ActivityItem(
                type=entry.kind.value,
                amount=entry.amount,
                description=entry.description,
                time=entry.created_at,
            )
            for entry in snapshot.recent_activity
        ],
    )


@router.get("/summary", response_model=DashboardSummary)
async def read_summary(db: AsyncSession = Depends(get_db)):
    service = DashboardService(db)
    return DashboardSummary(users=await service.user_count())
