"""
FastAPI dependencies shared by the routers.

The ledger service is built once per process and handed to every
request. It holds only the session factory, so sharing it across
concurrent requests is safe.
"""

from functools import lru_cache

from berry.models.base import SessionLocal
from berry.services.ledger_service import LedgerService


@lru_cache()
def get_ledger() -> LedgerService:
    return LedgerService(SessionLocal)
