"""
Ledger service errors.

Every public LedgerService operation has its own error family
(a base class below). A concrete error inherits from each family
it can occur in, so ``except CreateTransactionError`` catches
exactly the failures create_transaction can produce and nothing
else. StorageError belongs to every family: it wraps any database
failure that is not one of the named conditions.
"""

import uuid


class LedgerError(Exception):
    """Base exception for all ledger service failures."""


# --- Operation families ---

class CreateAccountError(LedgerError):
    """Raised by create_account."""


class GetAccountError(LedgerError):
    """Raised by get_account_by_id."""


class GetAccountByNameError(LedgerError):
    """Raised by get_account_by_name."""


class GetOrCreateAccountError(LedgerError):
    """Raised by get_or_create_account."""


class ListAccountsError(LedgerError):
    """Raised by list_accounts."""


class UpdateAccountError(LedgerError):
    """Raised by rename_account and update_account_balance."""


class DeleteAccountError(LedgerError):
    """Raised by delete_account."""


class CreateTransactionError(LedgerError):
    """Raised by create_transaction."""


class GetTransactionError(LedgerError):
    """Raised by get_transaction_by_id."""


class ListTransactionsError(LedgerError):
    """Raised by list_transactions."""


class DeleteTransactionError(LedgerError):
    """Raised by delete_transaction."""


# --- Concrete errors ---

class DuplicateAccountName(
    CreateAccountError, GetOrCreateAccountError, UpdateAccountError
):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Account name {name!r} is already taken")


class AccountNotFound(GetAccountError, UpdateAccountError, DeleteAccountError):
    def __init__(self, id: uuid.UUID):
        self.id = id
        super().__init__(f"Account with id {id} not found")


class AccountNameNotFound(GetAccountByNameError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Account with name {name!r} not found")


class SourceAccountNotFound(CreateTransactionError):
    def __init__(self, id: uuid.UUID):
        self.id = id
        super().__init__(f"Source account with id {id} was not found")


class DestinationAccountNotFound(CreateTransactionError):
    def __init__(self, id: uuid.UUID):
        self.id = id
        super().__init__(f"Destination account with id {id} was not found")


class TransactionNotFound(GetTransactionError, DeleteTransactionError):
    def __init__(self, id: uuid.UUID):
        self.id = id
        super().__init__(f"Transaction with id {id} was not found")


class StorageError(
    CreateAccountError,
    GetAccountError,
    GetAccountByNameError,
    GetOrCreateAccountError,
    ListAccountsError,
    UpdateAccountError,
    DeleteAccountError,
    CreateTransactionError,
    GetTransactionError,
    ListTransactionsError,
    DeleteTransactionError,
):
    """
    Any storage failure other than the named conditions.

    The message carries diagnostic context ("failed to save
    transaction ...") and the original exception is chained as
    __cause__.
    """
