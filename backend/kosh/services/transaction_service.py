"""
Transaction Service

Records merchant payments. Credits that reach the user's minimum threshold
move a share of the amount into the treasury (auto-save).
"""

from decimal import Decimal
from typing import Any, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.exceptions import ValidationException
from kosh.core.logging import get_logger
from kosh.core.money import ZERO, clamp, format_inr, positive_amount, round_whole
from kosh.models.settings import UserSettings
from kosh.models.transaction import Transaction, TransactionType
from kosh.models.treasury import EntryKind
from kosh.services.settings_service import MAX_RATE, SettingsService
from kosh.services.treasury_service import TreasuryService

logger = get_logger(__name__)

HISTORY_LIMIT = 100
BATCH_DESCRIPTION = "Batch credit"


def compute_auto_save(amount: Decimal, user_settings: Optional[UserSettings]) -> Tuple[Decimal, Decimal]:
    """
    Work out how much of a credit is auto-saved.

    Users without settings save nothing. The saved amount is rounded half-up
    to whole rupees.

    Returns:
        Tuple[Decimal, Decimal]: (effective rate, saved amount)
    """
    if user_settings is None:
        return ZERO, ZERO
    rate = clamp(Decimal(user_settings.auto_save_rate), ZERO, MAX_RATE)
    if rate <= ZERO or amount < Decimal(user_settings.min_threshold):
        return rate, ZERO
    return rate, round_whole(amount * rate / MAX_RATE)


class TransactionService:
    """Service for credits, debits and payment history."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.treasury = TreasuryService(db)

    async def _record(
        self,
        user_id: int,
        tx_type: TransactionType,
        amount: Decimal,
        description: Optional[str],
    ) -> Transaction:
        transaction = Transaction(
            user_id=user_id,
            type=tx_type,
            amount=amount,
            description=description,
        )
        self.db.add(transaction)
        await self.db.flush()
        return transaction

    async def _record_credit(
        self,
        user_id: int,
        amount: Decimal,
        description: Optional[str],
        user_settings: Optional[UserSettings],
    ) -> Tuple[Transaction, Decimal]:
        transaction = await self._record(user_id, TransactionType.CREDIT, amount, description)
        rate, saved = compute_auto_save(amount, user_settings)
        if saved > ZERO:
            await self.treasury.deposit(
                user_id,
                saved,
                EntryKind.SAVE,
                f"Auto-saved {format_inr(rate)}% of ₹{format_inr(amount)}",
                transaction_id=transaction.id,
            )
        return transaction, saved

    async def credit(
        self,
        user_id: int,
        raw_amount: Any,
        description: Optional[str] = None,
    ) -> Tuple[Transaction, Decimal, Decimal]:
        """
        Record an incoming payment and apply auto-save.

        Args:
            user_id: Receiving user
            raw_amount: Payment amount
            description: Optional free text

        Returns:
            Tuple of (transaction, saved amount, treasury balance)

        Raises:
            ValidationException: If the amount is not a positive number
        """
        amount = positive_amount(raw_amount)
        if amount is None:
            raise ValidationException("amount must be a positive number")

        user_settings = await SettingsService(self.db).get_for_user(user_id)
        transaction, saved = await self._record_credit(user_id, amount, description, user_settings)
        await self.db.commit()
        balance = await self.treasury.get_balance(user_id)

        logger.info(
            "Payment credited",
            extra={
                "user_id": user_id,
                "transaction_id": transaction.id,
                "amount": str(amount),
                "saved": str(saved),
            }
        )
        return transaction, saved, balance

    async def debit(
        self,
        user_id: int,
        raw_amount: Any,
        description: Optional[str] = None,
    ) -> Transaction:
        """Record an outgoing payment; the treasury is not touched."""
        amount = positive_amount(raw_amount)
        if amount is None:
            raise ValidationException("amount must be a positive number")

        transaction = await self._record(user_id, TransactionType.DEBIT, amount, description)
        await self.db.commit()

        logger.info(
            "Payment debited",
            extra={"user_id": user_id, "transaction_id": transaction.id, "amount": str(amount)}
        )
        return transaction

    async def batch_credit(self, user_id: int, amounts: Any) -> Tuple[int, int, Decimal, Decimal]:
        """
        Credit several amounts at once.

        Entries that are not positive numbers are skipped rather than
        failing the batch.

        Returns:
            Tuple of (processed, skipped, total saved, treasury balance)

        Raises:
            ValidationException: If amounts is not a non-empty list
        """
        if not isinstance(amounts, list) or not amounts:
            raise ValidationException("amounts must be a non-empty array of numbers")

        user_settings = await SettingsService(self.db).get_for_user(user_id)
        processed = skipped = 0
        total_saved = ZERO
        for raw_amount in amounts:
            amount = positive_amount(raw_amount)
            if amount is None:
                skipped += 1
                continue
            _, saved = await self._record_credit(user_id, amount, BATCH_DESCRIPTION, user_settings)
            total_saved += saved
            processed += 1

        await self.db.commit()
        balance = await self.treasury.get_balance(user_id)

        logger.info(
            "Batch credited",
            extra={
                "user_id": user_id,
                "processed": processed,
                "skipped": skipped,
                "saved": str(total_saved),
            }
        )
        return processed, skipped, total_saved, balance

    async def list_recent(self, user_id: int, limit: int = HISTORY_LIMIT) -> List[Transaction]:
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.occurred_at.desc(), Transaction.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
