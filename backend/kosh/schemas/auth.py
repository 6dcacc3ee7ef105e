"""Pydantic schemas for registration and login."""
from typing import Optional

from pydantic import Field

from kosh.schemas.base import ApiModel


class RegisterRequest(ApiModel):
    """Registration payload; password rules are left to the client."""

    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = Field(default=None, max_length=255)
    mobile: Optional[str] = Field(default=None, max_length=20)


class LoginRequest(ApiModel):
    """Login payload; `identifier` is accepted as an alias for email."""

    email: Optional[str] = None
    identifier: Optional[str] = None
    password: Optional[str] = None

    @property
    def login_email(self) -> Optional[str]:
        return self.email or self.identifier


class UserPublic(ApiModel):
    id: int
    email: str
    name: Optional[str] = None


class LoginResponse(ApiModel):
    token: str
    user: UserPublic


class SeedCredentials(ApiModel):
    email: str
    password: str


class SeedDevResponse(LoginResponse):
    message: str
    credentials: SeedCredentials
