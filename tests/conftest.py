"""Shared pytest fixtures for kostnad tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest
from openpyxl import Workbook

from kostnad.database.factories import create_sqlite_database
from kostnad.domain.category import CategoryService
from kostnad.domain.merchant import MerchantService
from kostnad.domain.summary import SummaryService
from kostnad.domain.transaction import TransactionService
from kostnad.domain.upload import StatementUploadService

HEADER_ROW = ("Reskontradatum", "Transaktionsdatum", "Text", "Belopp", "Saldo")


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def merchant_service(temp_db):
    """Create a MerchantService with a temporary database."""
    return MerchantService(temp_db)


@pytest.fixture
def upload_service(temp_db):
    """Create a StatementUploadService with a temporary database."""
    return StatementUploadService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def sample_categories(category_service):
    """Create a few categories and return their IDs by name."""
    names = ["Groceries", "Restaurants", "Transport", "Income", "Shopping"]
    return {name: category_service.create_category(name=name) for name in names}


@pytest.fixture
def sample_transactions(transaction_service, sample_categories):
    """Create manual transactions spread over January and February 2026."""
    rows = [
        (date(2026, 1, 3), "ICA MAXI", Decimal("-450.00"), "Groceries"),
        (date(2026, 1, 5), "ICA NARA", Decimal("-120.50"), "Groceries"),
        (date(2026, 1, 10), "PizzaTime", Decimal("-189.00"), "Restaurants"),
        (date(2026, 1, 25), "Lön", Decimal("32000.00"), "Income"),
        (date(2026, 2, 2), "Circle K", Decimal("-650.00"), "Transport"),
        (date(2026, 2, 14), "AMAZON", Decimal("-299.00"), None),
    ]
    ids = []
    for txn_date, merchant, amount, category in rows:
        category_id = sample_categories[category] if category else None
        ids.append(
            transaction_service.create_transaction(
                date=txn_date, merchant=merchant, amount=amount, category_id=category_id
            )
        )
    return ids


def write_statement(path, rows, sheet_title="Transaktioner"):
    """Write a Handelsbanken-style statement workbook.

    Rows 1-8 hold account metadata, row 9 the headers and data starts on
    row 10. Each data row is (booking date, transaction date, text, amount,
    balance).
    """
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title
    sheet.append(("Handelsbanken",))
    sheet.append(("Kontoutdrag",))
    sheet.append(("Konto", "6000 123 456 789"))
    sheet.append(("Kontoinnehavare", "Test Testsson"))
    sheet.append(())
    sheet.append(("Period", "2026-01-01 - 2026-01-31"))
    sheet.append(())
    sheet.append(())
    sheet.append(HEADER_ROW)
    for row in rows:
        sheet.append(tuple(row))
    workbook.save(path)
    return str(path)


@pytest.fixture
def make_statement(tmp_path):
    """Return a factory that writes a statement workbook into tmp_path."""

    def _make(rows, name="statement.xlsx"):
        return write_statement(tmp_path / name, rows)

    return _make


@pytest.fixture
def january_rows():
    """Statement rows for January 2026, including one preliminary row."""
    return [
        (None, "2026-01-30", "Prel ICA KVANTUM", -312.40, None),
        ("2026-01-29", "2026-01-28", "ICA KVANTUM", -245.90, 18354.10),
        ("2026-01-26", "2026-01-25", "Lön", 32000.00, 18600.00),
        ("2026-01-12", "2026-01-11", "Circle K Lerum", -650.00, -13400.00),
        ("2026-01-04", "2026-01-03", "AMAZON EU", -299.00, -12750.00),
    ]


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
