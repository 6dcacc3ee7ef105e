"""
Bank Service

Links settlement bank accounts through the mock provider.
"""

from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kosh.core.exceptions import ValidationException
from kosh.core.logging import get_logger
from kosh.models.bank import BANK_STATUS_LINKED, UserBank

logger = get_logger(__name__)

MOCK_PROVIDER = "mock"
MIN_ACCOUNT_NUMBER_LENGTH = 6


class BankService:
    """Service for linked bank accounts."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def get_linked(self, user_id: int) -> Optional[UserBank]:
        """Most recently linked account of a user, if any."""
        result = await self.db.execute(
            select(UserBank)
            .where(UserBank.user_id == user_id, UserBank.status == BANK_STATUS_LINKED)
            .order_by(UserBank.linked_at.desc(), UserBank.id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def link(self, user_id: int, account_number: Optional[Union[str, int]]) -> UserBank:
        """
        Link a bank account.

        Raises:
            ValidationException: If the trimmed account number is too short
        """
        account = str(account_number if account_number is not None else "").strip()
        if len(account) < MIN_ACCOUNT_NUMBER_LENGTH:
            raise ValidationException("accountNumber must be at least 6 digits")

        bank = UserBank(
            user_id=user_id,
            provider=MOCK_PROVIDER,
            account_number=account,
            status=BANK_STATUS_LINKED,
        )
        self.db.add(bank)
        await self.db.commit()
        await self.db.refresh(bank)

        logger.info(
            "Bank account linked",
            extra={"user_id": user_id, "bank_id": bank.id, "provider": bank.provider}
        )
        return bank
