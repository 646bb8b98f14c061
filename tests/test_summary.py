"""Tests for summary service and commands."""

from datetime import date
from decimal import Decimal

import pytest

from kostnad.cli.main import cli
from kostnad.domain.entities import Timeframe
from kostnad.domain.errors import NotFoundError, ValidationError
from kostnad.domain.summary import period_bounds


class TestBuildSummary:
    """Tests for range totals."""

    def test_totals(self, summary_service, sample_transactions):
        report = summary_service.build_summary()

        assert report.income == Decimal("32000.00")
        assert report.expenses == Decimal("1708.50")
        assert report.net == Decimal("30291.50")
        assert report.uncategorized_count == 1

    def test_inclusive_range(self, summary_service, sample_transactions):
        report = summary_service.build_summary(date(2026, 1, 3), date(2026, 1, 10))

        assert report.income == Decimal("0")
        assert report.expenses == Decimal("759.50")
        assert report.uncategorized_count == 0

    def test_category_totals(self, summary_service, sample_transactions, sample_categories):
        totals = summary_service.category_totals(date(2026, 1, 1), date(2026, 1, 31))

        by_name = {t.category_name: t for t in totals}
        assert by_name["Groceries"].total == Decimal("-570.50")
        assert by_name["Groceries"].count == 2
        assert by_name["Income"].total == Decimal("32000.00")
        assert totals[0].category_name == "Groceries"

    def test_uncategorized_grouped_as_none(self, summary_service, sample_transactions):
        totals = summary_service.category_totals(date(2026, 2, 1), date(2026, 2, 28))

        uncategorized = [t for t in totals if t.category_id is None]
        assert len(uncategorized) == 1
        assert uncategorized[0].category_name is None
        assert uncategorized[0].total == Decimal("-299.00")

    def test_invalid_range(self, summary_service):
        with pytest.raises(ValidationError):
            summary_service.build_summary(date(2026, 2, 1), date(2026, 1, 1))

    def test_top_merchants(self, summary_service, sample_transactions):
        top = summary_service.top_merchants(limit=2)

        assert [m.merchant for m in top] == ["Circle K", "ICA MAXI"]
        assert top[0].total == Decimal("650.00")
        assert top[0].count == 1


class TestPeriodTrends:
    """Tests for period trends."""

    def test_month_bounds(self):
        periods = period_bounds(Timeframe.MONTH, 3, date(2026, 2, 14))

        assert [p[0] for p in periods] == ["2025-12", "2026-01", "2026-02"]
        assert [p[1] for p in periods] == ["Dec", "Jan", "Feb"]
        assert periods[1][2:] == (date(2026, 1, 1), date(2026, 1, 31))
        assert periods[2][3] == date(2026, 2, 28)

    def test_week_bounds_use_iso_weeks(self):
        periods = period_bounds(Timeframe.WEEK, 2, date(2026, 1, 7))

        assert [p[0] for p in periods] == ["2026-W01", "2026-W02"]
        assert periods[0][2] == date(2025, 12, 29)
        assert periods[1][2:] == (date(2026, 1, 5), date(2026, 1, 11))
        assert periods[1][1] == "W2"

    def test_year_bounds(self):
        periods = period_bounds(Timeframe.YEAR, 2, date(2026, 6, 1))

        assert [p[0] for p in periods] == ["2025", "2026"]
        assert periods[0][2:] == (date(2025, 1, 1), date(2025, 12, 31))

    def test_monthly_trends_zero_filled(self, summary_service, sample_transactions):
        trends = summary_service.period_trends("month", 4, end_ref=date(2026, 3, 10))

        assert [t.period_key for t in trends] == ["2025-12", "2026-01", "2026-02", "2026-03"]
        assert trends[0].income == trends[0].expenses == Decimal("0")
        assert trends[1].income == Decimal("32000.00")
        assert trends[1].expenses == Decimal("759.50")
        assert trends[2].expenses == Decimal("949.00")
        assert trends[3].net == Decimal("0")

    def test_weekly_trends(self, summary_service, sample_transactions):
        trends = summary_service.period_trends(Timeframe.WEEK, 2, end_ref=date(2026, 1, 7))

        assert trends[0].expenses == Decimal("450.00")
        assert trends[1].expenses == Decimal("309.50")

    def test_invalid_arguments(self, summary_service):
        with pytest.raises(ValidationError):
            summary_service.period_trends("decade", 3)
        with pytest.raises(ValidationError):
            summary_service.period_trends("month", 0)


class TestSummaryCommands:
    """Tests for summary CLI commands."""

    def test_summary(self, cli_runner, temp_db, sample_transactions):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "summary",
                "--start-date",
                "2026-01-01",
                "--end-date",
                "2026-01-31",
            ],
        )

        assert result.exit_code == 0
        assert "32,000.00 kr" in result.output
        assert "Groceries" in result.output

    def test_summary_empty(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "summary"])

        assert result.exit_code == 0
        assert "No transactions found." in result.output

    def test_summary_invalid_date(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "summary", "--start-date", "whenever"]
        )

        assert result.exit_code == 1
        assert "Invalid start date" in result.output

    def test_trends(self, cli_runner, temp_db, sample_transactions):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "trends",
                "--timeframe",
                "month",
                "--count",
                "2",
                "--until",
                "2026-02-15",
            ],
        )

        assert result.exit_code == 0
        assert "2026-01" in result.output
        assert "2026-02" in result.output

    def test_top_merchants(self, cli_runner, temp_db, sample_transactions):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "top-merchants", "--limit", "1"]
        )

        assert result.exit_code == 0
        assert "Circle K" in result.output
        assert "ICA MAXI" not in result.output


class TestTopMerchantLimit:
    """Tests for merchant ranking limits."""

    @pytest.mark.parametrize("limit", [0, -1])
    def test_rejects_non_positive_limit(self, summary_service, sample_transactions, limit):
        with pytest.raises(ValidationError, match="Limit must be at least 1"):
            summary_service.top_merchants(limit=limit)

    def test_cli_rejects_negative_limit(self, cli_runner, temp_db, sample_transactions):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "top-merchants", "--limit", "-1"]
        )

        assert result.exit_code == 2
        assert "Circle K" not in result.output


class TestCategoryAnalytics:
    """Tests for per-category stats and trends."""

    def test_category_period_trends(self, summary_service, sample_transactions):
        trends = summary_service.category_period_trends("month", 2, end_ref=date(2026, 2, 15))

        assert [t.category_name for t in trends] == [
            "Transport",
            "Groceries",
            None,
            "Restaurants",
        ]
        groceries = trends[1]
        assert [p.period_key for p in groceries.periods] == ["2026-01", "2026-02"]
        assert groceries.periods[0].expenses == Decimal("570.50")
        assert groceries.periods[0].transaction_count == 2
        assert groceries.periods[1].expenses == Decimal("0")
        assert groceries.total == Decimal("570.50")

    def test_category_period_trends_skip_income(self, summary_service, sample_transactions):
        trends = summary_service.category_period_trends("month", 1, end_ref=date(2026, 1, 31))

        assert "Income" not in {t.category_name for t in trends}

    def test_single_category_trends(
        self, summary_service, sample_transactions, sample_categories
    ):
        trends = summary_service.category_trends(
            sample_categories["Income"], "month", 2, end_ref=date(2026, 2, 15)
        )

        assert trends[0].income == Decimal("32000.00")
        assert trends[0].transaction_count == 1
        assert trends[1].income == Decimal("0")

    def test_single_category_trends_missing_category(self, summary_service):
        with pytest.raises(NotFoundError):
            summary_service.category_trends(999, "month", 2)

    def test_category_stats(self, summary_service, sample_transactions, sample_categories):
        stats = summary_service.category_stats(sample_categories["Groceries"])

        assert stats.total_expenses == Decimal("570.50")
        assert stats.total_income == Decimal("0")
        assert stats.transaction_count == 2
        assert stats.average_expense == Decimal("285.25")
        assert stats.merchant_count == 2
        assert (stats.first_date, stats.last_date) == (date(2026, 1, 3), date(2026, 1, 5))

    def test_category_stats_in_range(self, summary_service, sample_transactions, sample_categories):
        stats = summary_service.category_stats(
            sample_categories["Groceries"], date(2026, 1, 4), date(2026, 1, 31)
        )

        assert stats.transaction_count == 1
        assert stats.total_expenses == Decimal("120.50")

    def test_category_stats_empty(self, summary_service, sample_transactions, sample_categories):
        stats = summary_service.category_stats(sample_categories["Shopping"])

        assert stats.transaction_count == 0
        assert stats.average_expense == Decimal("0")
        assert stats.first_date is None

    def test_category_top_merchants_merge_case(
        self, summary_service, transaction_service, sample_transactions, sample_categories
    ):
        transaction_service.create_transaction(
            date=date(2026, 1, 20),
            merchant="ica maxi",
            amount=Decimal("-30.00"),
            category_id=sample_categories["Groceries"],
        )

        top = summary_service.category_top_merchants(sample_categories["Groceries"])

        assert [m.merchant.casefold() for m in top] == ["ica maxi", "ica nara"]
        assert top[0].total == Decimal("480.00")
        assert top[0].count == 2

    def test_category_top_merchants_limit(self, summary_service, sample_categories):
        with pytest.raises(ValidationError):
            summary_service.category_top_merchants(sample_categories["Groceries"], limit=0)


@pytest.fixture
def yearly_history(transaction_service, sample_categories):
    """Expense history with yearly, monthly and irregular merchants."""
    rows = [
        (date(2025, 2, 10), "Bilförsäkring", "-4800.00", "Transport"),
        (date(2026, 2, 5), "Bilförsäkring", "-5000.00", "Transport"),
        (date(2025, 2, 1), "VATTENFALL", "-900.00", None),
        (date(2026, 1, 25), "Vattenfall", "-950.00", None),
        (date(2026, 1, 15), "Netflix", "-129.00", None),
        (date(2026, 2, 15), "Netflix", "-129.00", None),
        (date(2025, 1, 20), "Tandläkare", "-500.00", None),
        (date(2026, 1, 15), "Tandläkare", "-1500.00", None),
        (date(2025, 6, 1), "Hemförsäkring", "-1200.00", None),
        (date(2026, 6, 1), "Hemförsäkring", "-1200.00", None),
    ]
    for txn_date, merchant, amount, category in rows:
        transaction_service.create_transaction(
            date=txn_date,
            merchant=merchant,
            amount=Decimal(amount),
            category_id=sample_categories[category] if category else None,
        )


class TestUpcomingExpenses:
    """Tests for yearly expense prediction."""

    def test_predicts_yearly_expenses(self, summary_service, yearly_history):
        upcoming = summary_service.upcoming_expenses(today=date(2027, 1, 10))

        assert [u.merchant for u in upcoming] == ["Vattenfall", "Bilförsäkring"]
        vattenfall, insurance = upcoming
        assert vattenfall.expected_date == date(2027, 1, 25)
        assert vattenfall.days_until == 15
        assert vattenfall.expected_amount == Decimal("925.00")
        assert insurance.expected_date == date(2027, 2, 5)
        assert insurance.days_until == 26
        assert insurance.expected_amount == Decimal("4900.00")
        assert insurance.category_name == "Transport"

    def test_past_due_expenses_dropped(self, summary_service, yearly_history):
        upcoming = summary_service.upcoming_expenses(today=date(2027, 2, 10))

        assert upcoming == []

    def test_nothing_without_history(self, summary_service, sample_transactions):
        assert summary_service.upcoming_expenses(today=date(2026, 12, 1)) == []


class TestAnalyticsCommands:
    """Tests for analytics CLI commands."""

    def test_category_trends(self, cli_runner, temp_db, sample_transactions):
        result = cli_runner.invoke(
            cli,
            [
                "--db-path",
                temp_db.database_path,
                "category-trends",
                "--count",
                "2",
                "--until",
                "2026-02-15",
            ],
        )

        assert result.exit_code == 0
        assert "Transport" in result.output
        assert "Uncategorized" in result.output
        assert "570.50" in result.output

    def test_trends_count_must_be_positive(self, cli_runner, temp_db):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "trends", "--count", "0"]
        )

        assert result.exit_code == 2

    def test_upcoming(self, cli_runner, temp_db, yearly_history):
        result = cli_runner.invoke(
            cli, ["--db-path", temp_db.database_path, "upcoming", "--as-of", "2027-01-10"]
        )

        assert result.exit_code == 0
        assert "Vattenfall" in result.output
        assert "925.00 kr" in result.output
        assert "Netflix" not in result.output

    def test_upcoming_empty(self, cli_runner, temp_db):
        result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "upcoming"])

        assert result.exit_code == 0
        assert "No upcoming yearly expenses." in result.output
