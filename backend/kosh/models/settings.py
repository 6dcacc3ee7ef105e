"""Per-user savings rules."""

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kosh.db.base import Base

if TYPE_CHECKING:
    from kosh.models.user import User


class UserSettings(Base):
    """
    Auto-save configuration of a user.

    Attributes:
        auto_save_rate (Decimal): Percentage (0-100) of each qualifying credit moved to treasury
        weekly_top_up (Decimal): Default manual top-up amount
        min_threshold (Decimal): Smallest credit that triggers an auto-save
        round_ups_enabled (bool): Round-up savings preference
    """

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    auto_save_rate: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    weekly_top_up: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    min_threshold: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    round_ups_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    user: Mapped["User"] = relationship(back_populates="settings")

    __table_args__ = (
        CheckConstraint("auto_save_rate >= 0 AND auto_save_rate <= 100", name="auto_save_rate_range"),
        CheckConstraint("weekly_top_up >= 0", name="weekly_top_up_non_negative"),
        CheckConstraint("min_threshold >= 0", name="min_threshold_non_negative"),
    )

    def __repr__(self) -> str:
        return (
            f"<UserSettings(user_id={self.user_id}, "
            f"auto_save_rate={self.auto_save_rate}, "
            f"min_threshold={self.min_threshold})>"
        )
