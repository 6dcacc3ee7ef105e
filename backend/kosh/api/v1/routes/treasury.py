"""Treasury endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser
from kosh.db.session import get_db
from kosh.schemas.treasury import TopUpRequest, TopUpResponse, TreasuryEntryOut, TreasuryOut
from kosh.services.treasury_service import TreasuryService

router = APIRouter()


@router.get("", response_model=TreasuryOut)
async def read_treasury(user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Balance and the 50 most recent ledger entries."""
    service = TreasuryService(db)
    balance, entries = await service.get_treasury(user.id)
    return TreasuryOut(
        balance=balance,
        entries=[TreasuryEntryOut.model_validate(entry) for entry in entries],
    )


@router.post("/top-up", response_model=TopUpResponse)
async def top_up(
    user: ActingUser,
    data: TopUpRequest = TopUpRequest(),
    db: AsyncSession = Depends(get_db)
):
    """Add money manually; defaults to the user's weekly top-up amount."""
    service = TreasuryService(db)
    balance = await service.top_up(user.id, data.amount)
    return TopUpResponse(treasury_balance=balance)
