"""
Tests for the statement importer.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from berry.cli import (
    StatementError,
    import_statement,
    main,
    parse_amount,
    parse_date,
    read_statement,
)


def write_statement(tmp_path, content, name="statement.csv"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestParsing:

    def test_iso_date(self):
        assert parse_date("2025-01-06") == datetime(2025, 1, 6, tzinfo=timezone.utc)

    def test_day_first_date(self):
        assert parse_date("06/01/2025") == datetime(2025, 1, 6, tzinfo=timezone.utc)

    def test_bad_date(self):
        with pytest.raises(StatementError, match="failed to parse date"):
            parse_date("January 6th")

    def test_amount(self):
        assert parse_amount(" 12.34 ") == Decimal("12.34")

    def test_bad_amount(self):
        with pytest.raises(StatementError, match="decimal"):
            parse_amount("twelve")


class TestReadStatement:

    def test_header_without_category(self, tmp_path):
        path = write_statement(tmp_path, "date,title,amount\n2025-01-06,Shop,1.00\n")

        has_category, rows = read_statement(path)

        assert has_category is False
        assert rows == [(2, ["2025-01-06", "Shop", "1.00"])]

    def test_header_with_category(self, tmp_path):
        path = write_statement(
            tmp_path, "date,category,title,amount\n2025-01-06,Food,Shop,1.00\n"
        )

        has_category, rows = read_statement(path)

        assert has_category is True
        assert len(rows) == 1

    def test_blank_lines_keep_file_line_numbers(self, tmp_path):
        path = write_statement(
            tmp_path, "\ndate,title,amount\n\n2025-01-06,Shop,1.00\n"
        )

        _, rows = read_statement(path)

        assert rows == [(4, ["2025-01-06", "Shop", "1.00"])]

    def test_missing_file(self, tmp_path):
        with pytest.raises(StatementError, match="does not exist"):
            read_statement(tmp_path / "nope.csv")

    def test_empty_file(self, tmp_path):
        path = write_statement(tmp_path, "")

        with pytest.raises(StatementError, match="empty"):
            read_statement(path)

    def test_unknown_header(self, tmp_path):
        path = write_statement(tmp_path, "when,what,how much\n")

        with pytest.raises(StatementError, match="header"):
            read_statement(path)


class TestImportStatement:

    def test_import_creates_transactions(self, tmp_path, ledger):
        path = write_statement(tmp_path, (
            "date,title,amount\n"
            "2025-01-06,Coffee Shop,3.50\n"
            "07/01/2025,Book Store,20.00\n"
            "2025-01-08,Coffee Shop,4.00\n"
        ))

        created = import_statement(path, "Credit Card", ledger)

        assert created == 3
        card = ledger.get_account_by_name("Credit Card")
        coffee = ledger.get_account_by_name("Coffee Shop")
        books = ledger.get_account_by_name("Book Store")
        assert card.balance == Decimal("-27.50")
        assert coffee.balance == Decimal("7.50")
        assert books.balance == Decimal("20.00")
        # Repeated merchants reuse the same account
        assert len(ledger.list_accounts()) == 3

    def test_import_keeps_dates_and_categories(self, tmp_path, ledger):
        path = write_statement(tmp_path, (
            "date,category,title,amount\n"
            "06/01/2025,Food,Bakery,2.10\n"
            "2025-01-07,,Bakery,1.90\n"
        ))

        import_statement(path, "Credit Card", ledger)

        transactions = ledger.list_transactions()
        assert [t.category for t in transactions] == [None, "Food"]
        assert transactions[1].posting_date == datetime(2025, 1, 6, tzinfo=timezone.utc)

    def test_existing_source_account_is_reused(self, tmp_path, ledger):
        card = ledger.create_account("Credit Card")
        path = write_statement(tmp_path, "date,title,amount\n2025-01-06,Shop,5\n")

        import_statement(path, "Credit Card", ledger)

        assert ledger.get_account_by_id(card.id).balance == Decimal("-5")

    def test_wrong_field_count_stops_import(self, tmp_path, ledger):
        path = write_statement(tmp_path, (
            "date,title,amount\n"
            "2025-01-06,Shop,5\n"
            "2025-01-07,Shop\n"
        ))

        with pytest.raises(StatementError, match="line 3"):
            import_statement(path, "Credit Card", ledger)

        # Lines before the bad one are already recorded
        assert len(ledger.list_transactions()) == 1

    def test_bad_amount_stops_import(self, tmp_path, ledger):
        path = write_statement(tmp_path, "date,title,amount\n2025-01-06,Shop,abc\n")

        with pytest.raises(StatementError):
            import_statement(path, "Credit Card", ledger)

        assert ledger.list_transactions() == []
        # The merchant account is only created for a line that parses
        assert [a.name for a in ledger.list_accounts()] == ["Credit Card"]

    def test_bad_date_creates_no_merchant_account(self, tmp_path, ledger):
        path = write_statement(tmp_path, "date,title,amount\nyesterday,Shop,5\n")

        with pytest.raises(StatementError, match="failed to parse date"):
            import_statement(path, "Credit Card", ledger)

        assert [a.name for a in ledger.list_accounts()] == ["Credit Card"]

    def test_error_line_number_counts_blank_lines(self, tmp_path, ledger):
        path = write_statement(tmp_path, (
            "date,title,amount\n"
            "\n"
            "2025-01-06,Shop,5\n"
            "\n"
            "2025-01-07,Shop\n"
        ))

        with pytest.raises(StatementError, match="line 5"):
            import_statement(path, "Credit Card", ledger)

        assert len(ledger.list_transactions()) == 1


class TestMain:

    def test_main_returns_zero_on_success(self, tmp_path, ledger):
        path = write_statement(tmp_path, "date,title,amount\n2025-01-06,Shop,5\n")

        code = main(["--file", str(path), "--source-account", "Credit Card"], ledger=ledger)

        assert code == 0
        assert len(ledger.list_transactions()) == 1

    def test_main_returns_one_on_bad_file(self, tmp_path, ledger):
        code = main(["-f", str(tmp_path / "missing.csv"), "-s", "Credit Card"], ledger=ledger)
        assert code == 1

    def test_missing_arguments_exit(self):
        with pytest.raises(SystemExit):
            main([])
