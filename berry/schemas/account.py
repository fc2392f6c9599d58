"""
Pydantic schemas for account operations.

Account is the value object the ledger service hands out. It is
built from row data and frozen, so callers never hold a live
reference into the database session.
"""

import uuid
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator


def clean_name(value: str, what: str = "account name") -> str:
    """Trim a name and reject it if nothing is left."""
    trimmed = value.strip()
    if not trimmed:
        raise ValueError(f"{what} must not be empty")
    return trimmed


# --- Request Schemas ---

class AccountCreate(BaseModel):
    """Request to create a new account. Balance always starts at 0."""
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        return clean_name(v)


class AccountRename(BaseModel):
    name: str = Field(min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        return clean_name(v)


# --- Value Objects ---

class Account(BaseModel):
    id: uuid.UUID
    name: str
    balance: Decimal

    model_config = {"from_attributes": True, "frozen": True}
