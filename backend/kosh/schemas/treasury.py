"""Pydantic schemas for the treasury and its ledger."""
from typing import Any, List, Optional

from kosh.models.investment import RiskLevel
from kosh.models.treasury import EntryKind
from kosh.schemas.base import ApiModel, OkResponse, UtcDatetime


class TreasuryEntryOut(ApiModel):
    id: int
    kind: EntryKind
    amount: float
    description: Optional[str] = None
    transaction_id: Optional[int] = None
    risk: Optional[RiskLevel] = None
    units: Optional[float] = None
    nav_at_invest: Optional[float] = None
    created_at: UtcDatetime


class TreasuryOut(ApiModel):
    balance: float
    entries: List[TreasuryEntryOut]


class TopUpRequest(ApiModel):
    amount: Any = None


class TopUpResponse(OkResponse):
    treasury_balance: float
