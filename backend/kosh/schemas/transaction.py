"""Pydantic schemas for payment transactions."""
from typing import Any, Optional

from pydantic import Field

from kosh.db.base import as_utc
from kosh.models.transaction import TransactionType
from kosh.schemas.base import ApiModel, OkResponse, UtcDatetime

DATE_FORMAT = "%d/%m/%Y, %H:%M:%S"


class PaymentRequest(ApiModel):
    """Credit or debit payload; the amount is checked by the service."""

    amount: Any = None
    description: Optional[str] = Field(default=None, max_length=500)


class BatchCreditRequest(ApiModel):
    """Batch of raw credit amounts; entries that are not positive numbers are skipped."""

    amounts: Any = None


class TransactionOut(ApiModel):
    transaction_id: str
    amount: float
    type: TransactionType
    description: Optional[str] = None
    occurred_at: UtcDatetime
    date: str

    @classmethod
    def from_row(cls, row) -> "TransactionOut":
        occurred_at = as_utc(row.occurred_at)
        return cls(
            transaction_id=str(row.id),
            amount=float(row.amount),
            type=row.type,
            description=row.description,
            occurred_at=occurred_at,
            date=occurred_at.strftime(DATE_FORMAT),
        )


class CreditResponse(OkResponse):
    message: str = "Payment credited"
    transaction: TransactionOut
    saved: float
    treasury_balance: float


class DebitResponse(OkResponse):
    transaction: TransactionOut


class BatchCreditResponse(OkResponse):
    processed: int
    skipped: int
    saved: float
    treasury_balance: float
