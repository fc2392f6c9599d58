"""Business logic services."""

from berry.services.ledger_service import LedgerService

__all__ = ["LedgerService"]
