"""
Treasury models.

The Treasury row holds a user's current balance; TreasuryEntry is the
append-only ledger explaining every movement of that balance.
"""

from decimal import Decimal
from enum import Enum as PythonEnum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kosh.db.base import Base
from kosh.models.investment import RISK_ENUM, RiskLevel

if TYPE_CHECKING:
    from kosh.models.user import User


class EntryKind(str, PythonEnum):
    """Ledger entry kind."""
    SAVE = "save"            # auto-saved share of a credit, balance +
    INVEST = "invest"        # moved into a fund position, balance -
    LIQUIDATE = "liquidate"  # returned from fund positions, balance +
    TOPUP = "topup"          # manual top-up, balance +


class Treasury(Base):
    """Current treasury balance of a user."""

    __tablename__ = "treasuries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    balance: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False, default=Decimal("0"))

    user: Mapped["User"] = relationship(back_populates="treasury")

    __table_args__ = (
        CheckConstraint("balance >= 0", name="balance_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Treasury(user_id={self.user_id}, balance={self.balance})>"


class TreasuryEntry(Base):
    """
    Ledger entry for a treasury movement.

    Attributes:
        kind (EntryKind): Movement kind
        amount (Decimal): Absolute amount moved
        transaction_id (int): Credit that produced a save entry
        risk (RiskLevel): Fund bucket for invest entries
        units (Decimal): Units bought by invest entries
        nav_at_invest (Decimal): NAV used by invest entries
    """

    __tablename__ = "treasury_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    transaction_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("transactions.id", ondelete="SET NULL"),
        nullable=True
    )
    kind: Mapped[EntryKind] = mapped_column(
        Enum(
            EntryKind,
            values_callable=lambda kinds: [kind.value for kind in kinds],
            native_enum=False,
            length=16,
        ),
        nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    risk: Mapped[Optional[RiskLevel]] = mapped_column(RISK_ENUM, nullable=True)
    units: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)
    nav_at_invest: Mapped[Optional[Decimal]] = mapped_column(Numeric(18, 2), nullable=True)

    user: Mapped["User"] = relationship(back_populates="treasury_entries")

    __table_args__ = (
        Index("ix_treasury_entries_user_created", "user_id", "created_at"),
        CheckConstraint("amount > 0", name="entry_amount_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<TreasuryEntry(id={self.id}, user_id={self.user_id}, "
            f"kind={self.kind}, amount={self.amount})>"
        )
