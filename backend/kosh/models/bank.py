"""Linked bank accounts (mock provider)."""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kosh.db.base import Base, utcnow

if TYPE_CHECKING:
    from kosh.models.user import User

BANK_STATUS_LINKED = "linked"


class UserBank(Base):
    """Bank account a user linked for settlements."""

    __tablename__ = "user_banks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    provider: Mapped[str] = mapped_column(String(50), nullable=False, default="mock")
    account_number: Mapped[str] = mapped_column(String(34), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=BANK_STATUS_LINKED)
    linked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="banks")

    __table_args__ = (
        Index("ix_user_banks_user_status", "user_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<UserBank(id={self.id}, user_id={self.user_id}, status={self.status})>"
