"""Domain model entities for kostnad.

These are pure data classes representing business concepts, independent of
database schema. The parser and summary types live here too so that the
domain services can pass them around without touching the ORM.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: int
    name: str
    description: Optional[str]
    icon: Optional[str]
    is_default: bool
    created_at: datetime


@dataclass(frozen=True)
class Upload:
    """Statement upload domain entity."""

    id: int
    file_name: str
    uploaded_by: str
    transaction_count: int
    date_range_start: Optional[date]
    date_range_end: Optional[date]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    date: date
    merchant: str
    amount: Decimal
    balance: Optional[Decimal]
    category_id: Optional[int]
    original_hash: str
    upload_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class MerchantMapping:
    """Merchant pattern to category mapping."""

    id: int
    merchant_pattern: str
    category_id: Optional[int]
    is_multi_merchant: bool
    created_at: datetime


@dataclass(frozen=True)
class StatementRow:
    """A single accepted row from a bank statement."""

    date: date
    merchant: str
    amount: Decimal
    balance: Optional[Decimal] = None


@dataclass(frozen=True)
class ParsedStatement:
    """Rows accepted from a statement plus the observed date range."""

    rows: tuple[StatementRow, ...]
    min_date: Optional[date]
    max_date: Optional[date]


@dataclass(frozen=True)
class UploadResult:
    """Outcome of importing a statement."""

    upload_id: int
    file_name: str
    new_count: int
    skipped_count: int
    categorized_count: int
    date_range_start: Optional[date]
    date_range_end: Optional[date]


class Timeframe(str, Enum):
    """Period length used for trend summaries."""

    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class PeriodTrend:
    """Income and expense totals for one period."""

    period_key: str
    label: str
    start: date
    end: date
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    transaction_count: int = 0

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class CategoryTotal:
    """Summed amount and count for one category (None = uncategorized)."""

    category_id: Optional[int]
    category_name: Optional[str]
    total: Decimal
    count: int


@dataclass(frozen=True)
class MerchantTotal:
    """Expense totals for a merchant mapping."""

    mapping: MerchantMapping
    category_name: Optional[str]
    total_expenses: Decimal
    transaction_count: int


@dataclass(frozen=True)
class SummaryReport:
    """Dashboard summary for a date range."""

    start_date: Optional[date]
    end_date: Optional[date]
    income: Decimal
    expenses: Decimal
    uncategorized_count: int
    category_totals: tuple[CategoryTotal, ...] = field(default_factory=tuple)

    @property
    def net(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class MerchantSpend:
    """Expense total for one merchant text."""

    merchant: str
    total: Decimal
    count: int


@dataclass(frozen=True)
class CategoryTrend:
    """Expense totals of one category across a series of periods."""

    category_id: Optional[int]
    category_name: Optional[str]
    periods: tuple[PeriodTrend, ...]

    @property
    def total(self) -> Decimal:
        return sum((p.expenses for p in self.periods), Decimal("0"))


@dataclass(frozen=True)
class CategoryStats:
    """Aggregate figures for one category in a date range."""

    category_id: int
    total_expenses: Decimal
    total_income: Decimal
    transaction_count: int
    average_expense: Decimal
    merchant_count: int
    first_date: Optional[date]
    last_date: Optional[date]


@dataclass(frozen=True)
class CategoryDetails:
    """A category with its transaction count and the patterns mapping to it."""

    category: Category
    transaction_count: int
    merchant_patterns: tuple[str, ...]


@dataclass(frozen=True)
class MerchantStats:
    """Aggregate figures for the transactions matching a merchant pattern."""

    merchant_pattern: str
    total_expenses: Decimal
    transaction_count: int
    average_expense: Decimal
    first_date: Optional[date]
    last_date: Optional[date]


@dataclass(frozen=True)
class UpcomingExpense:
    """A yearly expense expected again soon."""

    merchant: str
    expected_amount: Decimal
    expected_date: date
    days_until: int
    category_id: Optional[int]
    category_name: Optional[str]
