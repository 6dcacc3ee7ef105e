"""Kosh - auto-save, treasury and mock mutual fund API for merchants."""

__version__ = "1.0.0"
