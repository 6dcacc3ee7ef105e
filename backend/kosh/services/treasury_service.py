"""
Treasury Service

Owns every movement of a user's treasury balance. Each movement appends a
ledger entry and adjusts the balance in the caller's database transaction;
only the public operations commit.
"""

from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.exceptions import InsufficientFundsException, ValidationException
from kosh.core.logging import get_logger
from kosh.core.money import ZERO, format_inr, positive_amount, quantize_money
from kosh.models.treasury import EntryKind, Treasury, TreasuryEntry
from kosh.services.settings_service import SettingsService

logger = get_logger(__name__)

LEDGER_PAGE_SIZE = 50


class TreasuryService:
    """Service for treasury balances and their ledger."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def get_or_create(self, user_id: int) -> Treasury:
        result = await self.db.execute(
            select(Treasury).where(Treasury.user_id == user_id)
        )
        treasury = result.scalar_one_or_none()
        if treasury is None:
            treasury = Treasury(user_id=user_id, balance=ZERO)
            self.db.add(treasury)
            await self.db.flush()
        return treasury

    async def get_balance(self, user_id: int) -> Decimal:
        result = await self.db.execute(
            select(Treasury.balance).where(Treasury.user_id == user_id)
        )
        balance = result.scalar_one_or_none()
        return quantize_money(balance) if balance is not None else ZERO

    async def _adjust(self, user_id: int, delta: Decimal) -> Decimal:
        await self.get_or_create(user_id)
        result = await self.db.execute(
            update(Treasury)
            .where(Treasury.user_id == user_id)
            .values(balance=Treasury.balance + delta)
            .returning(Treasury.balance)
            .execution_options(synchronize_session=False)
        )
        return quantize_money(result.scalar_one())

    async def deposit(
        self,
        user_id: int,
        amount: Decimal,
        kind: EntryKind,
        description: str,
        transaction_id: Optional[int] = None,
    ) -> Decimal:
        """
        Append an inflow entry and increase the balance (no commit).

        Returns:
            Decimal: Balance after the deposit
        """
        self.db.add(
            TreasuryEntry(
                user_id=user_id,
                transaction_id=transaction_id,
                kind=kind,
                amount=amount,
                description=description,
            )
        )
        return await self._adjust(user_id, amount)

    async def withdraw(self, user_id: int, amount: Decimal, entry: TreasuryEntry) -> Decimal:
        """
        Append an outflow entry and decrease the balance (no commit).

        Raises:
            InsufficientFundsException: If the balance cannot cover the amount
        """
        balance = await self.get_balance(user_id)
        if amount > balance:
            raise InsufficientFundsException(
                "Insufficient treasury balance",
                extra={"balance": float(balance), "requested": float(amount)}
            )
        self.db.add(entry)
        return await self._adjust(user_id, -amount)

    async def get_treasury(self, user_id: int) -> Tuple[Decimal, List[TreasuryEntry]]:
        """Balance plus the most recent ledger entries, newest first."""
        balance = await self.get_balance(user_id)
        result = await self.db.execute(
            select(TreasuryEntry)
            .where(TreasuryEntry.user_id == user_id)
            .order_by(TreasuryEntry.created_at.desc(), TreasuryEntry.id.desc())
            .limit(LEDGER_PAGE_SIZE)
        )
        return balance, list(result.scalars().all())

    async def top_up(self, user_id: int, raw_amount: Optional[Decimal] = None) -> Decimal:
        """
        Manually add money to the treasury.

        Args:
            user_id: Owner of the treasury
            raw_amount: Amount to add; the user's weekly top-up when omitted

        Returns:
            Decimal: New balance

        Raises:
            ValidationException: If the effective amount is not positive
        """
        if raw_amount is None:
            user_settings = await SettingsService(self.db).get_for_user(user_id)
            raw_amount = user_settings.weekly_top_up if user_settings else None

        amount = positive_amount(raw_amount)
        if amount is None:
            raise ValidationException("amount must be a positive number")

        balance = await self.deposit(
            user_id,
            amount,
            EntryKind.TOPUP,
            f"Manual top-up of ₹{format_inr(amount)}",
        )
        await self.db.commit()

        logger.info(
            "Treasury topped up",
            extra={"user_id": user_id, "amount": str(amount), "balance": str(balance)}
        )
        return balance
