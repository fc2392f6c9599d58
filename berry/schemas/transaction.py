"""
Pydantic schemas for transaction operations.

A positive amount flows from the source account to the
destination account. Amounts are exact decimals and are never
rounded by the ledger; display_amount() is for humans only.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from berry.schemas.account import clean_name


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TransactionCreate(BaseModel):
    """
    Request to create a transaction between two existing accounts.

    posting_date defaults to the moment the ledger records it.
    """
    title: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(max_digits=19, decimal_places=4)
    source_account_id: uuid.UUID
    destination_account_id: uuid.UUID
    category: str | None = Field(default=None, max_length=255)
    posting_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def title_must_not_be_blank(cls, v: str) -> str:
        return clean_name(v, "transaction title")

    @field_validator("category")
    @classmethod
    def blank_category_is_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("posting_date")
    @classmethod
    def posting_date_in_utc(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return None
        return as_utc(v)


class Transaction(BaseModel):
    id: uuid.UUID
    title: str
    amount: Decimal
    source_account_id: uuid.UUID
    destination_account_id: uuid.UUID
    category: str | None
    posting_date: datetime

    model_config = {"from_attributes": True, "frozen": True}

    def display_amount(self) -> str:
        return f"{self.amount:.2f}"
