"""Shared pydantic base for API payloads (camelCase on the wire)."""
from datetime import datetime

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Annotated

from kosh.db.base import as_utc

# SQLite returns naive datetimes; every stored timestamp is UTC.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class ApiModel(BaseModel):
    """Accepts camelCase or snake_case input and serializes as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class OkResponse(ApiModel):
    ok: bool = True
