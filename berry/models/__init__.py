"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from berry.models.base import Base
from berry.models.account import Account
from berry.models.posting import Posting

__all__ = [
    "Base",
    "Account",
    "Posting",
]
