"""
Models Package

This package contains all SQLAlchemy models for the application.
By importing them here, we ensure they are registered with SQLAlchemy's metadata
before Base.metadata.create_all() runs.
"""

from .user import User
from .settings import UserSettings
from .investment import InvestmentNav, InvestmentPosition, RiskLevel
from .transaction import Transaction, TransactionType
from .treasury import EntryKind, Treasury, TreasuryEntry
from .bank import BANK_STATUS_LINKED, UserBank

__all__ = [
    "BANK_STATUS_LINKED",
    "EntryKind",
    "InvestmentNav",
    "InvestmentPosition",
    "RiskLevel",
    "Transaction",
    "TransactionType",
    "Treasury",
    "TreasuryEntry",
    "User",
    "UserBank",
    "UserSettings",
]
