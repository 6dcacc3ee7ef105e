"""
Investment models.

This module defines the mock mutual fund NAVs and the positions users hold in
them. NAV rows are global (one per risk level); positions belong to a user
and record the amount invested (cost basis) together with the units bought.
"""

from decimal import Decimal
from enum import Enum as PythonEnum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kosh.db.base import Base

if TYPE_CHECKING:
    from kosh.models.user import User


class RiskLevel(str, PythonEnum):
    """Risk bucket of a mock fund."""
    HIGH = "high"
    LOW = "low"

    @property
    def fund_name(self) -> str:
        return "High Risk Fund" if self is RiskLevel.HIGH else "Low Risk Fund"

    @property
    def label(self) -> str:
        return "High Risk" if self is RiskLevel.HIGH else "Low Risk"


RISK_ENUM = Enum(
    RiskLevel,
    values_callable=lambda levels: [level.value for level in levels],
    native_enum=False,
    length=8,
)


class InvestmentNav(Base):
    """Current net asset value of the fund for a risk level."""

    __tablename__ = "investment_navs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    risk: Mapped[RiskLevel] = mapped_column(RISK_ENUM, unique=True, nullable=False)
    current_nav: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    __table_args__ = (
        CheckConstraint("current_nav > 0", name="current_nav_positive"),
    )

    def __repr__(self) -> str:
        return f"<InvestmentNav(risk={self.risk}, current_nav={self.current_nav})>"


class InvestmentPosition(Base):
    """Units of a fund bought with a given amount at a given NAV."""

    __tablename__ = "investment_positions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    risk: Mapped[RiskLevel] = mapped_column(RISK_ENUM, nullable=False)
    units: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    nav_at_invest: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)

    user: Mapped["User"] = relationship(back_populates="positions")

    __table_args__ = (
        Index("ix_investment_positions_user_created", "user_id", "created_at"),
        CheckConstraint("amount > 0", name="position_amount_positive"),
    )

    def __repr__(self) -> str:
        return (
            f"<InvestmentPosition(id={self.id}, user_id={self.user_id}, "
            f"risk={self.risk}, units={self.units}, amount={self.amount})>"
        )
