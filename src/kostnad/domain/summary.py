"""Summary and trend domain service."""

from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence, Union

from dateutil.relativedelta import relativedelta

from kostnad.database.base import Database
from kostnad.domain.entities import (
    CategoryStats,
    CategoryTotal,
    CategoryTrend,
    MerchantSpend,
    PeriodTrend,
    SummaryReport,
    Timeframe,
    Transaction,
    UpcomingExpense,
)
from kostnad.domain.errors import ValidationError, category_not_found

ZERO = Decimal("0")
CENT = Decimal("0.01")
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# A yearly expense recurs 10 to 14 (30-day) months after the previous one.
RECURRING_MIN_GAP_DAYS = 300
RECURRING_MAX_GAP_DAYS = 420
RECURRING_AMOUNT_TOLERANCE = Decimal("0.2")
RECURRING_INTERVAL_DAYS = 365
UPCOMING_HORIZON_DAYS = 60

Period = tuple[str, str, date, date]


def split_amounts(transactions: Sequence[Transaction]) -> tuple[Decimal, Decimal]:
    """Return (income, expenses) with expenses as a positive number."""
    income = sum((txn.amount for txn in transactions if txn.amount > 0), ZERO)
    expenses = sum((-txn.amount for txn in transactions if txn.amount < 0), ZERO)
    return income, expenses


def period_bounds(timeframe: Timeframe, count: int, end_ref: date) -> list[Period]:
    """Return (key, label, start, end) for the last ``count`` periods, oldest first.

    The final period is the one containing ``end_ref``. Week keys are ISO
    weeks ("2026-W04"), month keys "2026-01", year keys "2026".
    """
    periods = []
    for offset in range(count - 1, -1, -1):
        if timeframe == Timeframe.WEEK:
            start = end_ref - timedelta(days=end_ref.weekday()) - timedelta(weeks=offset)
            end = start + timedelta(days=6)
            iso_year, iso_week, _ = start.isocalendar()
            key = f"{iso_year}-W{iso_week:02d}"
            label = f"W{iso_week}"
        elif timeframe == Timeframe.MONTH:
            start = end_ref.replace(day=1) - relativedelta(months=offset)
            end = start + relativedelta(months=1) - timedelta(days=1)
            key = start.strftime("%Y-%m")
            label = MONTH_LABELS[start.month - 1]
        else:
            start = date(end_ref.year - offset, 1, 1)
            end = date(start.year, 12, 31)
            key = label = str(start.year)
        periods.append((key, label, start, end))
    return periods


def build_periods(
    timeframe: Union[Timeframe, str], count: int, end_ref: Optional[date] = None
) -> list[Period]:
    """Validate trend arguments and return the period bounds.

    Raises:
        ValidationError: If timeframe or count is invalid
    """
    try:
        timeframe = Timeframe(timeframe)
    except ValueError as e:
        raise ValidationError(f"Unknown timeframe: '{timeframe}'", field="timeframe") from e
    if count < 1:
        raise ValidationError("Period count must be at least 1", field="count")
    return period_bounds(timeframe, count, end_ref or date.today())


def bucket_by_period(
    periods: Sequence[Period], transactions: Iterable[Transaction]
) -> list[PeriodTrend]:
    """Income, expenses and transaction counts per period, zero-filled."""
    buckets: list[list[Transaction]] = [[] for _ in periods]
    for txn in transactions:
        for index, (_, _, start, end) in enumerate(periods):
            if start <= txn.date <= end:
                buckets[index].append(txn)
                break

    trends = []
    for (key, label, start, end), in_period in zip(periods, buckets):
        income, expenses = split_amounts(in_period)
        trends.append(
            PeriodTrend(
                period_key=key,
                label=label,
                start=start,
                end=end,
                income=income,
                expenses=expenses,
                transaction_count=len(in_period),
            )
        )
    return trends


def check_limit(limit: int) -> None:
    if limit < 1:
        raise ValidationError("Limit must be at least 1", field="limit")


def rank_merchants(
    transactions: Iterable[Transaction], limit: int, ignore_case: bool = False
) -> list[MerchantSpend]:
    """Group expenses by merchant text, highest total first.

    With ``ignore_case`` merchants differing only in case are merged and the
    first spelling seen is shown.
    """
    check_limit(limit)
    names: dict[str, str] = {}
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for txn in transactions:
        if txn.amount >= 0:
            continue
        key = txn.merchant.casefold() if ignore_case else txn.merchant
        names.setdefault(key, txn.merchant)
        totals[key] += -txn.amount
        counts[key] += 1

    ranked = sorted(totals.items(), key=lambda item: (-item[1], names[item[0]]))
    return [
        MerchantSpend(merchant=names[key], total=total, count=counts[key])
        for key, total in ranked[:limit]
    ]


def find_upcoming_expenses(
    transactions: Iterable[Transaction],
    category_names: dict[int, str],
    today: date,
) -> list[UpcomingExpense]:
    """Predict yearly expenses due within the next 60 days.

    Expenses are grouped by merchant (case-insensitive). The most recent
    expense is compared with older ones, newest first; the first one 10 to 14
    months older whose amount is within 20% of it establishes the pattern,
    and the next occurrence is expected a year after the most recent one.

    Returns:
        UpcomingExpense list, soonest first
    """
    by_merchant: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        if txn.amount < 0:
            by_merchant[txn.merchant.strip().casefold()].append(txn)

    horizon = today + timedelta(days=UPCOMING_HORIZON_DAYS)
    upcoming = []
    for history in by_merchant.values():
        if len(history) < 2:
            continue
        history.sort(key=lambda txn: (txn.date, txn.id or 0), reverse=True)
        latest = history[0]
        for older in history[1:]:
            gap = (latest.date - older.date).days
            if not RECURRING_MIN_GAP_DAYS <= gap <= RECURRING_MAX_GAP_DAYS:
                continue
            latest_amount, older_amount = -latest.amount, -older.amount
            average = (latest_amount + older_amount) / 2
            if abs(latest_amount - older_amount) / average > RECURRING_AMOUNT_TOLERANCE:
                continue

            expected = latest.date + timedelta(days=RECURRING_INTERVAL_DAYS)
            days_until = (expected - today).days
            if days_until > 0 and expected <= horizon:
                upcoming.append(
                    UpcomingExpense(
                        merchant=latest.merchant,
                        expected_amount=average.quantize(CENT, rounding=ROUND_HALF_UP),
                        expected_date=expected,
                        days_until=days_until,
                        category_id=latest.category_id,
                        category_name=category_names.get(latest.category_id),
                    )
                )
            break

    upcoming.sort(key=lambda item: (item.days_until, item.merchant))
    return upcoming


class SummaryService:
    """Service for dashboard totals, trends and category analytics."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def _transactions(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        category_id: Optional[int] = None,
    ) -> list[Transaction]:
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be before end date", field="date")
        return self.db.list_transactions(
            start_date=start_date, end_date=end_date, category_id=category_id
        )

    def _require_category(self, category_id: int) -> None:
        if self.db.get_category(category_id) is None:
            raise category_not_found(category_id)

    def _category_names(self) -> dict[int, str]:
        return {c.id: c.name for c in self.db.list_categories()}

    def build_summary(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> SummaryReport:
        """Build income, expense and category totals for a date range.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date

        Returns:
            SummaryReport for the range
        """
        transactions = self._transactions(start_date, end_date)
        income, expenses = split_amounts(transactions)
        return SummaryReport(
            start_date=start_date,
            end_date=end_date,
            income=income,
            expenses=expenses,
            uncategorized_count=sum(1 for txn in transactions if txn.category_id is None),
            category_totals=tuple(self._category_totals(transactions)),
        )

    def category_totals(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CategoryTotal]:
        """Signed totals per category, largest spending first.

        Uncategorized transactions are grouped under category_id None.
        """
        return self._category_totals(self._transactions(start_date, end_date))

    def _category_totals(self, transactions: Sequence[Transaction]) -> list[CategoryTotal]:
        names = self._category_names()
        totals: dict[Optional[int], Decimal] = defaultdict(lambda: ZERO)
        counts: dict[Optional[int], int] = defaultdict(int)
        for txn in transactions:
            totals[txn.category_id] += txn.amount
            counts[txn.category_id] += 1

        results = [
            CategoryTotal(
                category_id=category_id,
                category_name=names.get(category_id) if category_id is not None else None,
                total=total,
                count=counts[category_id],
            )
            for category_id, total in totals.items()
        ]
        results.sort(key=lambda r: r.total)
        return results

    def top_merchants(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 10,
    ) -> list[MerchantSpend]:
        """Merchants with the highest expenses in the range.

        Raises:
            ValidationError: If limit is below 1 or the range is reversed
        """
        check_limit(limit)
        return rank_merchants(self._transactions(start_date, end_date), limit)

    def period_trends(
        self,
        timeframe: Union[Timeframe, str] = Timeframe.MONTH,
        count: int = 6,
        end_ref: Optional[date] = None,
    ) -> list[PeriodTrend]:
        """Income and expenses for the last ``count`` periods.

        Periods without transactions are included with zero totals.

        Args:
            timeframe: week, month or year
            count: Number of periods
            end_ref: Date inside the last period, defaults to today

        Returns:
            PeriodTrend list, oldest first

        Raises:
            ValidationError: If timeframe or count is invalid
        """
        periods = build_periods(timeframe, count, end_ref)
        transactions = self.db.list_transactions(
            start_date=periods[0][2], end_date=periods[-1][3]
        )
        return bucket_by_period(periods, transactions)

    def category_period_trends(
        self,
        timeframe: Union[Timeframe, str] = Timeframe.MONTH,
        count: int = 6,
        end_ref: Optional[date] = None,
    ) -> list[CategoryTrend]:
        """Expenses per category for the last ``count`` periods.

        Only categories with expenses in the window are returned, highest
        total first. Uncategorized expenses are grouped under category_id
        None. Each trend carries every period, zero-filled.
        """
        periods = build_periods(timeframe, count, end_ref)
        expenses: dict[Optional[int], list[Transaction]] = defaultdict(list)
        for txn in self.db.list_transactions(start_date=periods[0][2], end_date=periods[-1][3]):
            if txn.amount < 0:
                expenses[txn.category_id].append(txn)

        names = self._category_names()
        trends = [
            CategoryTrend(
                category_id=category_id,
                category_name=names.get(category_id) if category_id is not None else None,
                periods=tuple(bucket_by_period(periods, transactions)),
            )
            for category_id, transactions in expenses.items()
        ]
        trends.sort(key=lambda t: (-t.total, t.category_name or ""))
        return trends

    def category_trends(
        self,
        category_id: int,
        timeframe: Union[Timeframe, str] = Timeframe.MONTH,
        count: int = 6,
        end_ref: Optional[date] = None,
    ) -> list[PeriodTrend]:
        """Income, expenses and counts of one category per period.

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If timeframe or count is invalid
        """
        self._require_category(category_id)
        periods = build_periods(timeframe, count, end_ref)
        transactions = self.db.list_transactions(
            start_date=periods[0][2], end_date=periods[-1][3], category_id=category_id
        )
        return bucket_by_period(periods, transactions)

    def category_stats(
        self,
        category_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> CategoryStats:
        """Totals, averages and date span of one category.

        The average is taken over expenses only. Merchants are counted
        case-insensitively.
        """
        self._require_category(category_id)
        transactions = self._transactions(start_date, end_date, category_id=category_id)
        income, expenses = split_amounts(transactions)
        expense_count = sum(1 for txn in transactions if txn.amount < 0)
        dates = [txn.date for txn in transactions]
        return CategoryStats(
            category_id=category_id,
            total_expenses=expenses,
            total_income=income,
            transaction_count=len(transactions),
            average_expense=(expenses / expense_count).quantize(CENT) if expense_count else ZERO,
            merchant_count=len({txn.merchant.casefold() for txn in transactions}),
            first_date=min(dates, default=None),
            last_date=max(dates, default=None),
        )

    def category_top_merchants(
        self,
        category_id: int,
        limit: int = 10,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[MerchantSpend]:
        """Merchants with the highest expenses within one category."""
        check_limit(limit)
        self._require_category(category_id)
        transactions = self._transactions(start_date, end_date, category_id=category_id)
        return rank_merchants(transactions, limit, ignore_case=True)

    def upcoming_expenses(self, today: Optional[date] = None) -> list[UpcomingExpense]:
        """Yearly recurring expenses expected in the next 60 days."""
        return find_upcoming_expenses(
            self.db.list_transactions(), self._category_names(), today or date.today()
        )
