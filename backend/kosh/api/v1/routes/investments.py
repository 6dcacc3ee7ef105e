"""
Investment Router

Invest treasury money into the mock funds, list and liquidate positions,
and move fund NAVs.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser
from kosh.db.session import get_db
from kosh.schemas.investment import (
    BalancesResponse,
    GrowRequest,
    GrowResponse,
    InvestRequest,
    LiquidateRequest,
    NavOut,
    PositionOut,
)
from kosh.services.investment_service import InvestmentService

router = APIRouter()


@router.post("", response_model=BalancesResponse)
async def invest(data: InvestRequest, user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Move treasury money into the high or low risk fund."""
    service = InvestmentService(db)
    invested, balance = await service.invest(user.id, data.amount, data.risk)
    return BalancesResponse(invested_amount=invested, treasury_balance=balance)


@router.get("", response_model=List[PositionOut])
async def list_positions(user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Positions newest first, valued at the current NAV."""
    service = InvestmentService(db)
    return [
        PositionOut(
            id=valued.position.id,
            fund_name=valued.position.risk.fund_name,
            risk=valued.position.risk,
            units=valued.position.units,
            investment_amount=valued.position.amount,
            nav=valued.nav,
            nav_at_invest=valued.position.nav_at_invest,
            current_value=valued.current_value,
            date=valued.position.created_at,
        )
        for valued in await service.get_positions(user.id)
    ]


@router.post("/liquidate", response_model=BalancesResponse)
async def liquidate(data: LiquidateRequest, user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Return invested money to the treasury, newest positions first."""
    service = InvestmentService(db)
    invested, balance = await service.liquidate(user.id, data.amount)
    return BalancesResponse(invested_amount=invested, treasury_balance=balance)


@router.post("/grow", response_model=GrowResponse)
async def grow(data: GrowRequest, db: AsyncSession = Depends(get_db)):
    """Move a fund's NAV by `ratePct` percent."""
    service = InvestmentService(db)
    navs = await service.grow(data.rate_pct, data.risk)
    return GrowResponse(navs=[NavOut.model_validate(nav) for nav in navs])


@router.get("/navs", response_model=List[NavOut])
async def list_navs(db: AsyncSession = Depends(get_db)):
    service = InvestmentService(db)
    return await service.list_navs()
