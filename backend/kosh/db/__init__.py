"""
Database Package

This package contains database connection and session management.
"""

from kosh.db.base import Base
from kosh.db.session import AsyncSessionLocal, engine, get_db, init_db

__all__ = [
    "AsyncSessionLocal",
    "Base",
    "engine",
    "get_db",
    "init_db",
]
