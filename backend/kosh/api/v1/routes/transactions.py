"""
Transaction Router

Credits (with auto-save), debits, batch credits and payment history.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.auth.dependencies import ActingUser
from kosh.db.session import get_db
from kosh.schemas.transaction import (
    BatchCreditRequest,
    BatchCreditResponse,
    CreditResponse,
    DebitResponse,
    PaymentRequest,
    TransactionOut,
)
from kosh.services.transaction_service import TransactionService

router = APIRouter()


@router.get("", response_model=List[TransactionOut])
async def list_transactions(user: ActingUser, db: AsyncSession = Depends(get_db)):
    """The 100 most recent transactions, newest first."""
    service = TransactionService(db)
    return [TransactionOut.from_row(tx) for tx in await service.list_recent(user.id)]


@router.post("/credit", response_model=CreditResponse)
async def credit(data: PaymentRequest, user: ActingUser, db: AsyncSession = Depends(get_db)):
    """
    Record an incoming payment.

    Credits of at least the user's minimum threshold move `autoSaveRate`
    percent of the amount, rounded to whole rupees, into the treasury.
    """
    service = TransactionService(db)
    transaction, saved, balance = await service.credit(user.id, data.amount, data.description)
    return CreditResponse(
        transaction=TransactionOut.from_row(transaction),
        saved=saved,
        treasury_balance=balance,
    )


@router.post("/debit", response_model=DebitResponse)
async def debit(data: PaymentRequest, user: ActingUser, db: AsyncSession = Depends(get_db)):
    service = TransactionService(db)
    transaction = await service.debit(user.id, data.amount, data.description)
    return DebitResponse(transaction=TransactionOut.from_row(transaction))


@router.post("/batch", response_model=BatchCreditResponse)
async def batch_credit(data: BatchCreditRequest, user: ActingUser, db: AsyncSession = Depends(get_db)):
    """Credit a list of amounts; invalid entries are skipped and counted."""
    service = TransactionService(db)
    processed, skipped, saved, balance = await service.batch_credit(user.id, data.amounts)
    return BatchCreditResponse(
        processed=processed,
        skipped=skipped,
        saved=saved,
        treasury_balance=balance,
    )
