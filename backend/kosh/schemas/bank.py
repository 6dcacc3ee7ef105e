"""Pydantic schemas for bank linking."""
from typing import Optional, Union

from kosh.schemas.base import ApiModel, OkResponse, UtcDatetime


class BankStatus(ApiModel):
    linked: bool
    account_number: Optional[str] = None
    linked_at: Optional[UtcDatetime] = None


class BankLinkRequest(ApiModel):
    # Numeric account numbers are accepted and kept as text
    account_number: Optional[Union[str, int]] = None


class BankLinkResponse(OkResponse):
    bank: BankStatus
