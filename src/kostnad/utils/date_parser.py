"""Date parsing for CLI input and statement cells."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

PERIODS = ("this-week", "this-month", "this-year", "last-week", "last-month", "last-year")

DAY_OFFSETS = {"today": 0, "yesterday": -1, "tomorrow": 1}


def _unit_start(unit: str, today: date) -> date:
    """First day of the week/month/year containing today."""
    if unit == "week":
        return today - timedelta(days=today.weekday())
    if unit == "month":
        return today.replace(day=1)
    if unit == "year":
        return today.replace(month=1, day=1)
    raise ValueError(f"Unknown unit '{unit}'")


def _unit_step(unit: str) -> relativedelta:
    return relativedelta(**{f"{unit}s": 1})


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date given on the command line.

    Accepts anything dateutil understands ("2026-01-15", "15 Jan 2026") plus
    "today", "yesterday", "tomorrow", "this week|month|year",
    "last week|month|year" (the first day of that period) and
    "last <weekday>".

    Raises:
        ValueError: If the string is not a date.
    """
    text = date_str.strip().lower()
    today = today or date.today()

    if text in DAY_OFFSETS:
        return today + timedelta(days=DAY_OFFSETS[text])

    which, _, unit = text.partition(" ")
    if which in ("this", "last") and unit in ("week", "month", "year"):
        start = _unit_start(unit, today)
        return start if which == "this" else start - _unit_step(unit)
    if which == "last" and unit in WEEKDAYS:
        return today - timedelta(days=(today.weekday() - WEEKDAYS.index(unit)) % 7 or 7)

    try:
        return date_parser.parse(text).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def coerce_date(value: object) -> Optional[date]:
    """Coerce a spreadsheet cell value to a date.

    Accepts datetime/date objects and ISO-style date strings ("2026-01-24").
    Returns None instead of raising for anything else, including blanks.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date_parser.isoparse(value.strip()).date()
        except (ValueError, OverflowError):
            return None
    return None


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Resolve a named period such as "last-month" to an inclusive range.

    "this-*" periods end today; "last-*" periods cover the whole previous
    week, month or year.
    """
    name = period.strip().lower()
    if name not in PERIODS:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")

    today = today or date.today()
    which, _, unit = name.partition("-")
    start = _unit_start(unit, today)
    if which == "this":
        return start, today
    return start - _unit_step(unit), start - timedelta(days=1)
