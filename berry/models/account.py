"""
Account model.

An account is a named bucket in the double-entry model: a bank
account, an "expenses" account, a merchant. Its balance is
stored and only ever changed by adding a delta in SQL.
"""

import uuid
from decimal import Decimal

from sqlalchemy import String, Numeric, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from berry.models.base import Base


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    # Uniqueness is enforced here, not in Python, so concurrent
    # creates cannot both succeed.
    name: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False
    )
    balance: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False, default=Decimal("0")
    )

    def __repr__(self) -> str:
        return f"<Account {self.name} ({self.balance})>"
