"""Bank linking endpoints (mock provider)."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser
from kosh.db.session import get_db
from kosh.schemas.bank import BankLinkRequest, BankLinkResponse, BankStatus
from kosh.services.bank_service import BankService

router = APIRouter()


def _status(bank) -> BankStatus:
    if bank is None:
        return BankStatus(linked=False)
    return BankStatus(linked=True, account_number=bank.account_number, linked_at=bank.linked_at)


@router.get("", response_model=BankStatus, response_model_exclude_none=True)
async def read_bank(user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Most recently linked account, or `{linked: false}`."""
    service = BankService(db)
    return _status(await service.get_linked(user.id))


@router.post("/link", response_model=BankLinkResponse)
async def link_bank(data: BankLinkRequest, user: ActingUser, db: AsyncSession = Depends(get_db)):
    service = BankService(db)
    bank = await service.link(user.id, data.account_number)
    return BankLinkResponse(bank=_status(bank))
