"""Pydantic schemas for user profile operations."""
from typing import Optional

from pydantic import Field

from kosh.schemas.base import ApiModel, UtcDatetime


class UserMe(ApiModel):
    id: int
    email: str
    name: Optional[str] = None
    created_at: UtcDatetime


class UserProfile(UserMe):
    phone_number: Optional[str] = None
    updated_at: UtcDatetime


class UserProfileUpdate(ApiModel):
    name: Optional[str] = Field(default=None, max_length=255)
    phone_number: Optional[str] = Field(default=None, max_length=20)
