"""Authentication models for login, signup and bearer tokens."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from hrdesk.models.user import EMAIL_PATTERN, ROLE_KEYS, UserPublic, strip_keys


class UserInfo(BaseModel):
    id: str | None = None
    name: str | None = None
    email: str | None = None
    company: str | None = None
    roles: list[str] = []


class SignupRequest(BaseModel):
    """Signup form data. ``loginId`` is generated when omitted; ``role`` is never taken from the caller."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    login_id: str | None = Field(default=None, min_length=1, max_length=64)
    email: str = Field(..., max_length=100, pattern=EMAIL_PATTERN)
    name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=128)
    company_name: str | None = Field(default=None, max_length=100)
    avatar: str | None = None
    phone: str | None = None
    logo: str | None = None
    created_at: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_role(cls, data: Any) -> Any:
        return strip_keys(data, ROLE_KEYS)

    @model_validator(mode="after")
    def check_login_id_or_company(self) -> SignupRequest:
        if not self.login_id and not (self.company_name and self.company_name.strip()):
            raise ValueError("Either loginId or companyName is required")
        return self


class LoginRequest(BaseModel):
    """Either ``identifier``, ``email`` or ``loginId`` names the account."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    identifier: str | None = None
    email: str | None = None
    login_id: str | None = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_identifier(self) -> LoginRequest:
        if not (self.identifier or self.email or self.login_id):
            raise ValueError("An email or loginId is required")
        return self

    def resolved_identifier(self) -> str:
        return self.identifier or self.email or self.login_id or ""


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPublic
