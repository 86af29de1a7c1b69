"""User account models. Stored records use camelCase keys."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# The role is assigned at signup and the company decides which Admin manages
# the account, so callers never set either.
ROLE_KEYS: frozenset[str] = frozenset({"role"})
ACCOUNT_KEYS: frozenset[str] = ROLE_KEYS | {"companyName", "company_name"}


def strip_keys(data: Any, keys: frozenset[str]) -> Any:
    if isinstance(data, dict):
        return {k: v for k, v in data.items() if k not in keys}
    return data


class UserPublic(BaseModel):
    """A user record as returned to callers (never carries a password)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    login_id: str
    email: str | None = None
    name: str | None = None
    company_name: str | None = None
    role: str | None = None
    avatar: str | None = None
    phone: str | None = None
    logo: str | None = None
    created_at: str | None = None


class UserUpdate(BaseModel):
    """Partial update; only the keys sent are merged into the record.

    ``role`` and ``companyName`` are dropped, even as extra keys.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    email: str | None = Field(default=None, max_length=100, pattern=EMAIL_PATTERN)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    password: str | None = Field(default=None, min_length=1, max_length=128)
    avatar: str | None = None
    phone: str | None = None
    logo: str | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_account_keys(cls, data: Any) -> Any:
        return strip_keys(data, ACCOUNT_KEYS)
