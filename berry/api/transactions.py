"""
Transaction API endpoints.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from berry.api.accounts import internal_error
from berry.api.dependencies import get_ledger
from berry.pagination import pagination_from_query
from berry.schemas.transaction import Transaction, TransactionCreate
from berry.services.errors import (
    DestinationAccountNotFound,
    SourceAccountNotFound,
    StorageError,
    TransactionNotFound,
)
from berry.services.ledger_service import LedgerService

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])

# Larger page numbers give offsets the database cannot store
MAX_QUERY_INT = 2**32 - 1


@router.post("", response_model=Transaction, status_code=201)
def create_transaction(
    request: TransactionCreate,
    ledger: LedgerService = Depends(get_ledger),
):
    """
    Record a transaction.

    Subtracts the amount from the source account and adds it
    to the destination account in the same unit of work.
    """
    try:
        return ledger.create_transaction(request)
    except SourceAccountNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"could not find source account {e.id}"
        )
    except DestinationAccountNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"could not find destination account {e.id}"
        )
    except StorageError as e:
        raise internal_error(e)


@router.get("", response_model=list[Transaction])
def list_transactions(
    page: int | None = Query(default=None, le=MAX_QUERY_INT),
    per_page: int | None = Query(default=None, le=MAX_QUERY_INT),
    ledger: LedgerService = Depends(get_ledger),
):
    """
    List transactions, most recent first.

    Without page or per_page every transaction is returned.
    per_page defaults to 20 and is capped at 100.
    """
    try:
        return ledger.list_transactions(pagination_from_query(page, per_page))
    except StorageError as e:
        raise internal_error(e)


@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction(
    transaction_id: uuid.UUID,
    ledger: LedgerService = Depends(get_ledger),
):
    try:
        return ledger.get_transaction_by_id(transaction_id)
    except TransactionNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"transaction with id {e.id} does not exist"
        )
    except StorageError as e:
        raise internal_error(e)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: uuid.UUID,
    ledger: LedgerService = Depends(get_ledger),
):
    """Delete a transaction and reverse its effect on both balances."""
    try:
        ledger.delete_transaction(transaction_id)
    except TransactionNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"transaction with id {e.id} does not exist"
        )
    except StorageError as e:
        raise internal_error(e)
    return Response(status_code=204)
