"""
Credit card statement importer.

Reads a CSV statement and records one transaction per line, from
the credit card account to an account named after the merchant.
Both accounts are created on first use.

Usage:
    berry-import --file statement.csv --source-account "Credit Card"
    python -m berry.cli -f statement.csv -s "Credit Card"

Accepted headers:
    date,title,amount
    date,category,title,amount
"""

import argparse
import csv
import logging
import sys
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path

from berry.config import get_settings
from berry.logging import setup_logging
from berry.schemas.transaction import TransactionCreate
from berry.services.errors import CreateTransactionError, LedgerError
from berry.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

HEADER_WITHOUT_CATEGORY = ["date", "title", "amount"]
HEADER_WITH_CATEGORY = ["date", "category", "title", "amount"]


class StatementError(Exception):
    """Raised when a statement file cannot be read or parsed."""


def parse_date(raw: str) -> datetime:
    """Parse YYYY-MM-DD or DD/MM/YYYY into midnight UTC."""
    raw = raw.strip()
    fmt = "%d/%m/%Y" if "/" in raw else "%Y-%m-%d"
    try:
        parsed = datetime.strptime(raw, fmt)
    except ValueError:
        raise StatementError(f"failed to parse date: {raw}") from None
    return parsed.replace(tzinfo=timezone.utc)


def parse_amount(raw: str) -> Decimal:
    try:
        return Decimal(raw.strip())
    except InvalidOperation:
        raise StatementError(f"failed to parse amount into decimal: {raw}") from None


def read_statement(path: Path) -> tuple[bool, list[tuple[int, list[str]]]]:
    """
    Read a statement file.

    Returns whether the file has a category column, and the data
    rows without the header, each paired with its line number in
    the file. Blank lines are skipped.
    """
    if not path.exists():
        raise StatementError(f"file {str(path)!r} does not exist")

    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        rows = [(reader.line_num, row) for row in reader if row]

    if not rows:
        raise StatementError(f"file {path} is empty")

    header = [column.strip() for column in rows[0][1]]
    if header == HEADER_WITHOUT_CATEGORY:
        has_category = False
    elif header == HEADER_WITH_CATEGORY:
        has_category = True
    else:
        raise StatementError(
            'the header of the file must be either "{}" or "{}"'.format(
                ",".join(HEADER_WITHOUT_CATEGORY),
                ",".join(HEADER_WITH_CATEGORY),
            )
        )
    return has_category, rows[1:]


def import_statement(
    path: Path, source_account: str, ledger: LedgerService
) -> int:
    """
    Import every line of a statement into the ledger.

    A line that cannot be parsed stops the import. A line the
    ledger rejects is logged and skipped.

    Returns:
        The number of transactions created.
    """
    has_category, rows = read_statement(path)
    expected_fields = 4 if has_category else 3

    credit_card = ledger.get_or_create_account(source_account)

    created = 0
    for line_number, row in rows:
        if len(row) != expected_fields:
            raise StatementError(
                f"line {line_number} does not contain the expected "
                f"number of fields: {','.join(row)}"
            )
        if has_category:
            date, category, title, amount = row
        else:
            date, title, amount = row
            category = None

        posting_date = parse_date(date)
        parsed_amount = parse_amount(amount)

        # The merchant in the title becomes the destination account
        destination = ledger.get_or_create_account(title)
        request = TransactionCreate(
            title=title,
            amount=parsed_amount,
            source_account_id=credit_card.id,
            destination_account_id=destination.id,
            category=category,
            posting_date=posting_date,
        )

        try:
            transaction = ledger.create_transaction(request)
        except CreateTransactionError as e:
            logger.error("Failed to create transaction on line %d: %s", line_number, e)
            continue

        logger.info("Created transaction %s (%s)", transaction.id, transaction.title)
        created += 1

    return created


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="berry-import",
        description="Import a credit card statement into the ledger",
    )
    parser.add_argument(
        "-f", "--file", type=Path, required=True,
        help="The input file containing financial data",
    )
    parser.add_argument(
        "-s", "--source-account", required=True,
        help="Name of the source account",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, ledger: LedgerService | None = None) -> int:
    args = parse_args(argv)
    setup_logging(get_settings().LOG_LEVEL)

    if ledger is None:
        from berry.models.base import SessionLocal
        ledger = LedgerService(SessionLocal)

    try:
        created = import_statement(args.file, args.source_account, ledger)
    except (StatementError, LedgerError, ValueError) as e:
        logger.error("Import failed: %s", e)
        return 1

    logger.info("Imported %d transactions from %s", created, args.file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
