"""
Posting model.

A posting is one transaction: a fixed amount flowing from a
source account to a destination account. Postings are never
updated; deleting one reverses its effect on both balances.

The account columns carry no foreign keys. Account existence is
checked when a posting is created, not afterwards.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, DateTime, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from berry.models.base import Base


class Posting(Base):
    __tablename__ = "postings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False
    )
    source_account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, index=True
    )
    destination_account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, index=True
    )
    category: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    posting_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )

    def __repr__(self) -> str:
        return f"<Posting {self.title!r} {self.amount}>"
