"""Tests for the Handelsbanken statement parser."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from openpyxl import Workbook

from kostnad.domain.errors import ValidationError
from kostnad.domain.statement_parser import (
    coerce_amount,
    parse_row,
    parse_rows,
    parse_statement,
)


class TestCoerceAmount:
    """Tests for cell amount coercion."""

    def test_numbers(self):
        assert coerce_amount(-65) == Decimal("-65")
        assert coerce_amount(-245.9) == Decimal("-245.9")
        assert coerce_amount(Decimal("12.50")) == Decimal("12.50")

    def test_swedish_strings(self):
        assert coerce_amount("-65,00") == Decimal("-65.00")
        assert coerce_amount("-1 234,50") == Decimal("-1234.50")
        assert coerce_amount("1.234,50 kr") == Decimal("1234.50")

    def test_attached_currency_and_unicode_minus(self):
        assert coerce_amount("100kr") == Decimal("100")
        assert coerce_amount("−245,90") == Decimal("-245.90")

    def test_unparseable(self):
        assert coerce_amount("abc") is None
        assert coerce_amount("") is None
        assert coerce_amount(None) is None
        assert coerce_amount(True) is None
        assert coerce_amount(float("nan")) is None


class TestParseRow:
    """Tests for single-row parsing rules."""

    def test_valid_row(self):
        row = parse_row(("2026-01-29", "2026-01-28", "ICA KVANTUM", -245.9, 18354.1))

        assert row is not None
        assert row.date == date(2026, 1, 28)
        assert row.merchant == "ICA KVANTUM"
        assert row.amount == Decimal("-245.9")
        assert row.balance == Decimal("18354.1")

    def test_uses_transaction_date_not_booking_date(self):
        row = parse_row(("2026-02-02", "2026-01-31", "Circle K", -650, None))
        assert row.date == date(2026, 1, 31)

    def test_datetime_cells(self):
        row = parse_row((datetime(2026, 1, 29), datetime(2026, 1, 28), "ICA", -10, None))
        assert row.date == date(2026, 1, 28)

    def test_merchant_is_trimmed(self):
        row = parse_row(("2026-01-29", "2026-01-28", "  ICA KVANTUM  ", -10, None))
        assert row.merchant == "ICA KVANTUM"

    def test_empty_merchant_skipped(self):
        assert parse_row(("2026-01-29", "2026-01-28", "", -10, None)) is None
        assert parse_row(("2026-01-29", "2026-01-28", "   ", -10, None)) is None
        assert parse_row(("2026-01-29", "2026-01-28", None, -10, None)) is None

    def test_preliminary_without_booking_date_skipped(self):
        assert parse_row((None, "2026-01-30", "Prel ICA KVANTUM", -312.4, None)) is None

    def test_preliminary_with_booking_date_kept(self):
        row = parse_row(("2026-01-31", "2026-01-30", "Prel ICA KVANTUM", -312.4, None))
        assert row is not None
        assert row.merchant == "Prel ICA KVANTUM"

    def test_missing_booking_date_without_prefix_kept(self):
        row = parse_row((None, "2026-01-30", "ICA KVANTUM", -312.4, None))
        assert row is not None

    def test_unparseable_date_skipped(self):
        assert parse_row(("2026-01-29", "not a date", "ICA", -10, None)) is None
        assert parse_row(("2026-01-29", None, "ICA", -10, None)) is None

    def test_unparseable_amount_skipped(self):
        assert parse_row(("2026-01-29", "2026-01-28", "ICA", "n/a", None)) is None
        assert parse_row(("2026-01-29", "2026-01-28", "ICA", None, None)) is None

    def test_balance_optional(self):
        row = parse_row(("2026-01-29", "2026-01-28", "ICA", -10, "garbage"))
        assert row is not None
        assert row.balance is None

    def test_short_row_padded(self):
        row = parse_row(("2026-01-29", "2026-01-28", "ICA", -10))
        assert row is not None
        assert row.balance is None


class TestParseRows:
    """Tests for multi-row parsing."""

    def test_date_range_tracks_accepted_rows(self):
        statement = parse_rows(
            [
                ("2026-01-29", "2026-01-28", "ICA", -10, None),
                (None, "2026-02-15", "Prel COOP", -5, None),
                ("2026-01-04", "2026-01-03", "COOP", -20, None),
            ]
        )

        assert len(statement.rows) == 2
        assert statement.min_date == date(2026, 1, 3)
        assert statement.max_date == date(2026, 1, 28)

    def test_empty_rows_ignored(self):
        statement = parse_rows([(None, None, None, None, None), ()])

        assert statement.rows == ()
        assert statement.min_date is None
        assert statement.max_date is None

    def test_order_preserved(self):
        statement = parse_rows(
            [
                ("2026-01-29", "2026-01-28", "B", -1, None),
                ("2026-01-04", "2026-01-03", "A", -2, None),
            ]
        )
        assert [r.merchant for r in statement.rows] == ["B", "A"]


class TestParseStatement:
    """Tests for reading whole workbooks."""

    def test_parse_file(self, make_statement, january_rows):
        path = make_statement(january_rows)

        statement = parse_statement(path)

        assert len(statement.rows) == 4
        assert [r.merchant for r in statement.rows] == [
            "ICA KVANTUM",
            "Lön",
            "Circle K Lerum",
            "AMAZON EU",
        ]
        assert statement.min_date == date(2026, 1, 3)
        assert statement.max_date == date(2026, 1, 28)

    def test_header_rows_ignored(self, make_statement):
        path = make_statement([])

        statement = parse_statement(path)

        assert statement.rows == ()

    def test_only_first_sheet_read(self, tmp_path):
        workbook = Workbook()
        first = workbook.active
        for _ in range(9):
            first.append(("header",))
        first.append(("2026-01-29", "2026-01-28", "ICA", -10, None))
        second = workbook.create_sheet("Other")
        for _ in range(9):
            second.append(("header",))
        second.append(("2026-01-29", "2026-01-28", "COOP", -20, None))
        path = tmp_path / "two_sheets.xlsx"
        workbook.save(path)

        statement = parse_statement(path)

        assert [r.merchant for r in statement.rows] == ["ICA"]

    def test_not_a_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_text("this is not a zip file")

        with pytest.raises(ValidationError, match="Failed to parse Excel file"):
            parse_statement(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValidationError, match="Failed to parse Excel file"):
            parse_statement(tmp_path / "missing.xlsx")
