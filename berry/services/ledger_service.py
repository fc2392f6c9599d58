"""
Ledger service, the core of the system.

This service is the only code that writes accounts and postings,
and the only code that changes a balance. It enforces:
1. A posting and both balance changes commit together or not at all
2. Balances change by adding a delta in SQL, never by read-then-write
3. Account names are unique (enforced by the database constraint)
4. A posting's accounts exist when it is created

Each public method runs in its own unit of work opened from the
session factory, so one LedgerService can be shared by every
request handler.
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from berry.models.account import Account as AccountModel
from berry.models.posting import Posting
from berry.pagination import MAX_PER_PAGE, PaginationParameters
from berry.schemas.account import Account, clean_name
from berry.schemas.transaction import Transaction, TransactionCreate, as_utc
from berry.services.errors import (
    AccountNameNotFound,
    AccountNotFound,
    DestinationAccountNotFound,
    DuplicateAccountName,
    SourceAccountNotFound,
    StorageError,
    TransactionNotFound,
)

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(err: IntegrityError) -> bool:
    """
    Check whether an IntegrityError came from a UNIQUE constraint.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports
    the constraint in its error name and message.
    """
    orig = err.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_SQLSTATE
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CONSTRAINT_UNIQUE":
        return True
    return "UNIQUE constraint failed" in str(orig)


@contextmanager
def _storage_errors(message: str, *translate: type[Exception]):
    """
    Turn database failures into StorageError.

    Any exception types passed in ``translate`` are wrapped as
    well; this is how a missing account during a balance reset
    becomes a storage failure of the whole operation.
    """
    try:
        yield
    except (SQLAlchemyError, *translate) as err:
        logger.error("%s: %s", message, err)
        raise StorageError(message) from err


@contextmanager
def _account_name_constraint(name: str, message: str):
    """Map a UNIQUE violation on accounts.name to DuplicateAccountName."""
    try:
        yield
    except IntegrityError as err:
        if is_unique_violation(err):
            raise DuplicateAccountName(name) from err
        logger.error("%s: %s", message, err)
        raise StorageError(message) from err


def _to_transaction(row) -> Transaction:
    return Transaction(
        id=row.id,
        title=row.title,
        amount=row.amount,
        source_account_id=row.source_account_id,
        destination_account_id=row.destination_account_id,
        category=row.category,
        # SQLite hands back naive datetimes; everything is stored in UTC
        posting_date=as_utc(row.posting_date),
    )


class LedgerService:
    """
    All account and posting operations pass through this service.

    The service takes a session factory rather than a session:
    it owns the transaction boundary of every operation, so a
    caller can never observe a half-applied posting.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    # --- Accounts ---

    def create_account(self, name: str) -> Account:
        """
        Create a new account with a zero balance.

        Uniqueness is left to the database constraint rather
        than checked first, so two concurrent creates with the
        same name cannot both succeed.

        Raises:
            DuplicateAccountName: the name is already taken.
            StorageError: any other database failure.
        """
        name = clean_name(name)
        account_id = uuid.uuid4()
        message = f"failed to save account with name {name!r}"

        with _storage_errors(message), _account_name_constraint(name, message):
            with self.session_factory.begin() as session:
                session.add(
                    AccountModel(id=account_id, name=name, balance=Decimal("0"))
                )
                session.flush()

        logger.info("Created account %s", account_id)
        return Account(id=account_id, name=name, balance=Decimal("0"))

    def list_accounts(self) -> list[Account]:
        """Return every account ordered by name. Empty list if none."""
        with _storage_errors("failed to list accounts"):
            with self.session_factory() as session:
                rows = session.execute(
                    select(AccountModel).order_by(AccountModel.name)
                ).scalars().all()
                return [Account.model_validate(row) for row in rows]

    def get_account_by_id(self, id: uuid.UUID) -> Account:
        """
        Raises:
            AccountNotFound: no account has this id.
            StorageError: any other database failure.
        """
        with _storage_errors(f"failed to fetch account {id}"):
            with self.session_factory() as session:
                row = session.get(AccountModel, id)
                account = Account.model_validate(row) if row else None

        if account is None:
            raise AccountNotFound(id)
        logger.debug("Found account %r", account)
        return account

    def get_account_by_name(self, name: str) -> Account:
        """
        Look an account up by exact (trimmed, case-sensitive) name.

        Raises:
            AccountNameNotFound: no account has this name.
            StorageError: any other database failure.
        """
        name = clean_name(name)
        with _storage_errors(f"failed to fetch account named {name!r}"):
            with self.session_factory() as session:
                row = session.execute(
                    select(AccountModel).where(AccountModel.name == name)
                ).scalar_one_or_none()
                account = Account.model_validate(row) if row else None

        if account is None:
            raise AccountNameNotFound(name)
        logger.debug("Found account %r", account)
        return account

    def get_or_create_account(self, name: str) -> Account:
        """
        Fetch an account by name, creating it if it does not exist.

        The lookup and the create are separate units of work. If
        another caller creates the same name in between, this
        raises DuplicateAccountName; callers that need the
        account regardless should retry.

        Raises:
            DuplicateAccountName: lost a race to create the name.
            StorageError: any other database failure.
        """
        try:
            return self.get_account_by_name(name)
        except AccountNameNotFound:
            logger.debug("No account named %r, creating it", name)
        return self.create_account(name)

    def rename_account(self, id: uuid.UUID, new_name: str) -> None:
        """
        Rename an account with a single UPDATE.

        There is no read before the write: a missing account shows
        up as zero affected rows and a taken name as a constraint
        violation.

        Raises:
            AccountNotFound: no account has this id.
            DuplicateAccountName: another account has the new name.
            StorageError: any other database failure.
        """
        new_name = clean_name(new_name)
        message = f"failed to rename account {id}"

        with _storage_errors(message), _account_name_constraint(new_name, message):
            with self.session_factory.begin() as session:
                result = session.execute(
                    update(AccountModel)
                    .where(AccountModel.id == id)
                    .values(name=new_name)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise AccountNotFound(id)

        logger.info("Renamed account %s to %r", id, new_name)

    def update_account_balance(self, id: uuid.UUID, delta: Decimal) -> Account:
        """
        Add a signed delta to an account's balance in its own unit of work.

        Raises:
            AccountNotFound: no account has this id.
            StorageError: any other database failure.
        """
        with _storage_errors(f"failed to update balance of account {id}"):
            with self.session_factory.begin() as session:
                account = self._add_balance_to_account(session, id, delta)

        logger.info("Updated balance of account %s to %s", id, account.balance)
        return account

    def delete_account(self, id: uuid.UUID) -> None:
        """
        Delete an account.

        Postings that reference the account are left alone.

        Raises:
            AccountNotFound: no account has this id.
            StorageError: any other database failure.
        """
        with _storage_errors(f"failed to delete account {id}"):
            with self.session_factory.begin() as session:
                result = session.execute(
                    delete(AccountModel)
                    .where(AccountModel.id == id)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    raise AccountNotFound(id)

        logger.info("Deleted account %s", id)

    def _add_balance_to_account(
        self, session: Session, id: uuid.UUID, delta: Decimal
    ) -> Account:
        """
        Add ``delta`` to a balance inside the caller's unit of work.

        The addition happens in the UPDATE statement itself, so two
        concurrent postings against the same account serialize on
        the row lock instead of losing an update.
        """
        row = session.execute(
            update(AccountModel)
            .where(AccountModel.id == id)
            .values(balance=AccountModel.balance + delta)
            .returning(AccountModel.id, AccountModel.name, AccountModel.balance)
            .execution_options(synchronize_session=False)
        ).one_or_none()

        if row is None:
            raise AccountNotFound(id)
        return Account.model_validate(row)

    # --- Transactions ---

    def _check_if_accounts_exist(
        self, source_account_id: uuid.UUID, destination_account_id: uuid.UUID
    ) -> None:
        """Source is checked first, so its error wins when both are missing."""
        try:
            self.get_account_by_id(source_account_id)
        except AccountNotFound:
            raise SourceAccountNotFound(source_account_id) from None
        try:
            self.get_account_by_id(destination_account_id)
        except AccountNotFound:
            raise DestinationAccountNotFound(destination_account_id) from None

    def create_transaction(self, request: TransactionCreate) -> Transaction:
        """
        Record a transaction and move its amount between the accounts.

        The posting insert, the source debit and the destination
        credit run in one unit of work. If any of them fails the
        whole unit rolls back and no balance changes survive.

        Raises:
            SourceAccountNotFound: the source account does not exist.
            DestinationAccountNotFound: the destination account does not exist.
            StorageError: any other failure, including an account
                disappearing between the check and the update.
        """
        self._check_if_accounts_exist(
            request.source_account_id, request.destination_account_id
        )

        # One clock reading for the row and the returned value
        posting_date = (
            as_utc(request.posting_date)
            if request.posting_date is not None
            else datetime.now(timezone.utc)
        )
        transaction_id = uuid.uuid4()

        with _storage_errors("failed to commit transaction"):
            with self.session_factory.begin() as session:
                with _storage_errors(
                    f"failed to save transaction with title {request.title!r}"
                ):
                    session.add(Posting(
                        id=transaction_id,
                        title=request.title,
                        amount=request.amount,
                        source_account_id=request.source_account_id,
                        destination_account_id=request.destination_account_id,
                        category=request.category,
                        posting_date=posting_date,
                    ))
                    session.flush()

                logger.debug("Saved transaction, updating account balances")

                with _storage_errors(
                    "failed to reset source account balance", AccountNotFound
                ):
                    source = self._add_balance_to_account(
                        session, request.source_account_id, -request.amount
                    )
                with _storage_errors(
                    "failed to reset destination account balance", AccountNotFound
                ):
                    destination = self._add_balance_to_account(
                        session, request.destination_account_id, request.amount
                    )

                logger.debug(
                    "Updated balances: source=%s destination=%s",
                    source.balance, destination.balance,
                )

        logger.info("Created transaction %s", transaction_id)
        return Transaction(
            id=transaction_id,
            title=request.title,
            amount=request.amount,
            source_account_id=request.source_account_id,
            destination_account_id=request.destination_account_id,
            category=request.category,
            posting_date=posting_date,
        )

    def delete_transaction(self, id: uuid.UUID) -> None:
        """
        Delete a transaction and reverse its effect on both balances.

        The account ids stored on the posting are trusted. If one of
        those accounts has been deleted since, the reversal fails,
        the unit of work rolls back and the posting stays in place.

        Raises:
            TransactionNotFound: no transaction has this id.
            StorageError: any other failure.
        """
        with _storage_errors(f"failed to delete transaction {id}"):
            with self.session_factory.begin() as session:
                row = session.execute(
                    delete(Posting)
                    .where(Posting.id == id)
                    .returning(
                        Posting.source_account_id,
                        Posting.destination_account_id,
                        Posting.amount,
                    )
                    .execution_options(synchronize_session=False)
                ).one_or_none()

                if row is None:
                    raise TransactionNotFound(id)

                with _storage_errors(
                    "failed to reset source account balance", AccountNotFound
                ):
                    self._add_balance_to_account(
                        session, row.source_account_id, row.amount
                    )
                with _storage_errors(
                    "failed to reset destination account balance", AccountNotFound
                ):
                    self._add_balance_to_account(
                        session, row.destination_account_id, -row.amount
                    )

        logger.info("Deleted transaction %s", id)

    def get_transaction_by_id(self, id: uuid.UUID) -> Transaction:
        """
        Raises:
            TransactionNotFound: no transaction has this id.
            StorageError: any other database failure.
        """
        with _storage_errors(f"failed to fetch transaction {id}"):
            with self.session_factory() as session:
                row = session.get(Posting, id)
                transaction = _to_transaction(row) if row else None

        if transaction is None:
            raise TransactionNotFound(id)
        logger.debug("Found transaction %s", id)
        return transaction

    def list_transactions(
        self, pagination: PaginationParameters | None = None
    ) -> list[Transaction]:
        """
        Return transactions, most recent posting date first.

        Without pagination every transaction is returned. With it,
        only the requested page, and never more than MAX_PER_PAGE
        rows. An empty ledger gives an empty list.
        """
        query = select(Posting).order_by(
            Posting.posting_date.desc(), Posting.id
        )
        if pagination is not None:
            query = query.limit(min(pagination.limit, MAX_PER_PAGE)).offset(
                pagination.offset
            )

        # SQLite rejects offsets beyond 64 bits with OverflowError
        with _storage_errors("failed to list transactions", OverflowError):
            with self.session_factory() as session:
                rows = session.execute(query).scalars().all()
                transactions = [_to_transaction(row) for row in rows]

        logger.debug("Listed %d transactions", len(transactions))
        return transactions
