"""
Transaction model for incoming and outgoing merchant payments.

Credits may trigger an auto-save into the treasury; debits are recorded only.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PythonEnum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from kosh.db.base import Base, utcnow

if TYPE_CHECKING:
    from kosh.models.user import User


class TransactionType(str, PythonEnum):
    """Transaction type enum."""
    CREDIT = "credit"
    DEBIT = "debit"


class Transaction(Base):
    """
    Payment received (credit) or made (debit) by a merchant.

    Attributes:
        id (int): Primary key
        user_id (int): Owning user
        type (TransactionType): credit or debit
        amount (Decimal): Positive amount in INR
        description (str): Free text
        occurred_at (datetime): When the payment happened
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    type: Mapped[TransactionType] = mapped_column(
        Enum(
            TransactionType,
            values_callable=lambda types: [t.value for t in types],
            native_enum=False,
            length=8,
        ),
        nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="transactions")

    __table_args__ = (
        Index("ix_transactions_user_occurred", "user_id", "occurred_at"),
        CheckConstraint("amount > 0", name="transaction_amount_positive"),
    )

    @validates("amount")
    def validate_amount(self, key: str, amount: Decimal) -> Decimal:
        """Validate transaction amount."""
        if amount <= 0:
            raise ValueError("Transaction amount must be positive")
        return amount

    def __repr__(self) -> str:
        return (
            f"<Transaction(id={self.id}, "
            f"user_id={self.user_id}, "
            f"amount={self.amount}, "
            f"type={self.type})>"
        )
