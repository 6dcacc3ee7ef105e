"""
User model.

A user owns exactly one Settings row and one Treasury, plus the ledger,
positions, transactions and linked banks hanging off them.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from kosh.db.base import Base

if TYPE_CHECKING:
    from kosh.models.bank import UserBank
    from kosh.models.investment import InvestmentPosition
    from kosh.models.settings import UserSettings
    from kosh.models.transaction import Transaction
    from kosh.models.treasury import Treasury, TreasuryEntry


class User(Base):
    """
    Merchant account.

    Attributes:
        id (int): Primary key
        email (str): Login email, stored lower-cased
        password_hash (str): Argon2 (or legacy bcrypt) hash
        name (str): Display name
        phone_number (str): Optional contact number
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    settings: Mapped[Optional["UserSettings"]] = relationship(
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan"
    )
    treasury: Mapped[Optional["Treasury"]] = relationship(
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan"
    )
    treasury_entries: Mapped[List["TreasuryEntry"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan"
    )
    positions: Mapped[List["InvestmentPosition"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan"
    )
    transactions: Mapped[List["Transaction"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan"
    )
    banks: Mapped[List["UserBank"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan"
    )

    @validates("email")
    def normalize_email(self, key: str, email: str) -> str:
        return email.strip().lower()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
