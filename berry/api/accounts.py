"""
Account API endpoints.

The API layer is thin: it maps ledger errors to status codes
and delegates everything else to the LedgerService.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Response

from berry.api.dependencies import get_ledger
from berry.schemas.account import Account, AccountCreate, AccountRename
from berry.services.errors import (
    AccountNameNotFound,
    AccountNotFound,
    DuplicateAccountName,
    StorageError,
)
from berry.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


def internal_error(err: StorageError) -> HTTPException:
    logger.exception("Ledger storage failure", exc_info=err)
    return HTTPException(status_code=500, detail="internal server error")


@router.post("", response_model=Account, status_code=201)
def create_account(
    request: AccountCreate,
    ledger: LedgerService = Depends(get_ledger),
):
    """Create a new account with a zero balance."""
    try:
        return ledger.create_account(request.name)
    except DuplicateAccountName as e:
        raise HTTPException(
            status_code=422,
            detail=f'an account with the name "{e.name}" already exists',
        )
    except StorageError as e:
        raise internal_error(e)


@router.get("", response_model=list[Account])
def list_accounts(ledger: LedgerService = Depends(get_ledger)):
    try:
        return ledger.list_accounts()
    except StorageError as e:
        raise internal_error(e)


# Declared before /{account_id} so "find-by-name" is not parsed as an id
@router.get("/find-by-name", response_model=Account)
def find_account_by_name(
    name: str,
    ledger: LedgerService = Depends(get_ledger),
):
    """Find an account by its exact name."""
    try:
        return ledger.get_account_by_name(name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AccountNameNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"no account found with name {e.name}"
        )
    except StorageError as e:
        raise internal_error(e)


@router.get("/{account_id}", response_model=Account)
def get_account(
    account_id: uuid.UUID,
    ledger: LedgerService = Depends(get_ledger),
):
    try:
        return ledger.get_account_by_id(account_id)
    except AccountNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"account with id {e.id} not found"
        )
    except StorageError as e:
        raise internal_error(e)


@router.patch("/{account_id}/name", status_code=200)
def rename_account(
    account_id: uuid.UUID,
    request: AccountRename,
    ledger: LedgerService = Depends(get_ledger),
):
    try:
        ledger.rename_account(account_id, request.name)
    except AccountNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"account with id {e.id} does not exist"
        )
    except DuplicateAccountName as e:
        raise HTTPException(
            status_code=422,
            detail=f"account with name {e.name} already exists",
        )
    except StorageError as e:
        raise internal_error(e)
    return Response(status_code=200)


@router.delete("/{account_id}", status_code=204)
def delete_account(
    account_id: uuid.UUID,
    ledger: LedgerService = Depends(get_ledger),
):
    """
    Delete an account.

    Transactions that reference the account are not touched.
    """
    try:
        ledger.delete_account(account_id)
    except AccountNotFound as e:
        raise HTTPException(
            status_code=404, detail=f"account with id {e.id} does not exist"
        )
    except StorageError as e:
        raise internal_error(e)
    return Response(status_code=204)
