"""Handelsbanken account statement (.xlsx) parser.

Export layout: rows 1-8 hold account metadata, row 9 the column headers and
row 10 onwards the transactions. Columns (1-based):

    A  Reskontradatum     booking date, empty for preliminary rows
    B  Transaktionsdatum  transaction date
    C  Text               merchant
    D  Belopp             amount, negative for expenses
    E  Saldo              running balance

Preliminary rows carry a "Prel" merchant prefix and no booking date. They are
dropped here and picked up from a later export once the bank has booked them.
"""

import logging
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import BinaryIO, Optional, Union
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from kostnad.domain.entities import ParsedStatement, StatementRow
from kostnad.domain.errors import ValidationError
from kostnad.utils.amount_parser import parse_amount
from kostnad.utils.date_parser import coerce_date

logger = logging.getLogger(__name__)

DATA_START_ROW = 10
PRELIMINARY_PREFIX = "Prel"

BOOKING_DATE_COL = 0
TRANSACTION_DATE_COL = 1
MERCHANT_COL = 2
AMOUNT_COL = 3
BALANCE_COL = 4
ROW_WIDTH = 5


def coerce_amount(value: object) -> Optional[Decimal]:
    """Coerce a cell value to a Decimal.

    Numbers pass through; strings use the Swedish format with a comma
    decimal separator ("-1 234,50"). Returns None when the value does not parse.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        amount = Decimal(str(value))
        return amount if amount.is_finite() else None
    if isinstance(value, str):
        try:
            return parse_amount(value, decimal_separator=",")
        except ValueError:
            return None
    return None


def parse_row(cells: tuple, row_number: int = 0) -> Optional[StatementRow]:
    """Turn one data row into a StatementRow, or None if it must be skipped."""
    cells = tuple(cells) + (None,) * (ROW_WIDTH - len(cells))

    merchant_cell = cells[MERCHANT_COL]
    merchant = merchant_cell.strip() if isinstance(merchant_cell, str) else ""
    if not merchant:
        logger.debug("Row %d: skipped, no merchant", row_number)
        return None

    booking_date = coerce_date(cells[BOOKING_DATE_COL])
    if merchant.startswith(PRELIMINARY_PREFIX) and booking_date is None:
        logger.debug("Row %d: skipped preliminary transaction '%s'", row_number, merchant)
        return None

    txn_date = coerce_date(cells[TRANSACTION_DATE_COL])
    if txn_date is None:
        logger.debug("Row %d: skipped, unparseable date %r", row_number, cells[TRANSACTION_DATE_COL])
        return None

    amount = coerce_amount(cells[AMOUNT_COL])
    if amount is None:
        logger.debug("Row %d: skipped, unparseable amount %r", row_number, cells[AMOUNT_COL])
        return None

    return StatementRow(
        date=txn_date,
        merchant=merchant,
        amount=amount,
        balance=coerce_amount(cells[BALANCE_COL]),
    )


def parse_rows(rows, start_row: int = DATA_START_ROW) -> ParsedStatement:
    """Parse an iterable of cell tuples that starts at ``start_row``.

    Tracks the min/max transaction date of the accepted rows.
    """
    accepted: list[StatementRow] = []
    min_date: Optional[date] = None
    max_date: Optional[date] = None

    for row_number, cells in enumerate(rows, start=start_row):
        if cells is None or all(cell is None for cell in cells):
            continue
        row = parse_row(cells, row_number)
        if row is None:
            continue
        accepted.append(row)
        if min_date is None or row.date < min_date:
            min_date = row.date
        if max_date is None or row.date > max_date:
            max_date = row.date

    return ParsedStatement(rows=tuple(accepted), min_date=min_date, max_date=max_date)


def parse_statement(source: Union[str, Path, BinaryIO]) -> ParsedStatement:
    """Parse a Handelsbanken statement workbook.

    Args:
        source: Path to an .xlsx file or a binary file object

    Returns:
        ParsedStatement with accepted rows and the observed date range

    Raises:
        ValidationError: If the file is not a readable workbook or has no worksheets
    """
    try:
        workbook = load_workbook(source, read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as e:
        logger.info("Could not open workbook %s: %s", source, e)
        raise ValidationError("Failed to parse Excel file", field="file") from e

    try:
        if not workbook.worksheets:
            raise ValidationError("Excel file has no worksheets", field="file")
        worksheet = workbook.worksheets[0]
        statement = parse_rows(
            worksheet.iter_rows(min_row=DATA_START_ROW, values_only=True),
            start_row=DATA_START_ROW,
        )
    finally:
        workbook.close()

    logger.debug(
        "Parsed %d rows (%s to %s)", len(statement.rows), statement.min_date, statement.max_date
    )
    return statement
