"""Shared output formatting for CLI commands."""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

import click

from kostnad.domain.entities import PeriodTrend, Transaction


def format_amount(amount: Optional[Decimal]) -> str:
    """Format an amount in kronor, e.g. "-1,234.50 kr"."""
    if amount is None:
        return ""
    return f"{amount:,.2f} kr"


def format_range(start: Optional[date], end: Optional[date]) -> str:
    """Format an inclusive date range for headings."""
    if start is None and end is None:
        return "all time"
    return f"{start or '...'} to {end or '...'}"


def print_transaction_table(
    transactions: Sequence[Transaction], category_names: dict[int, str]
) -> None:
    """Print transactions as a compact table followed by totals."""
    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>16}  {'Category':<24} {'Merchant':<38}")
    click.echo("-" * 100)

    for txn in transactions:
        category_name = category_names.get(txn.category_id, "") if txn.category_id else ""
        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {format_amount(txn.amount):>16}  "
            f"{category_name[:24]:<24} {txn.merchant[:38]:<38}"
        )

    total_expenses = sum(txn.amount for txn in transactions if txn.amount < 0)
    total_income = sum(txn.amount for txn in transactions if txn.amount > 0)
    click.echo("-" * 100)
    click.echo(
        f"{'TOTAL':<6} Expenses: {format_amount(abs(total_expenses))} | "
        f"Income: {format_amount(total_income)} | Count: {len(transactions)}"
    )


def print_period_table(trends: Sequence[PeriodTrend], include_income: bool = True) -> None:
    """Print one row per period."""
    if include_income:
        click.echo(f"\n{'Period':<10} {'Count':>6} {'Income':>18} {'Expenses':>18} {'Net':>18}")
        click.echo("-" * 74)
    else:
        click.echo(f"\n{'Period':<10} {'Count':>6} {'Expenses':>18}")
        click.echo("-" * 36)
    for trend in trends:
        line = f"{trend.period_key:<10} {trend.transaction_count:>6} "
        if include_income:
            line += f"{format_amount(trend.income):>18} {format_amount(trend.expenses):>18} "
            line += f"{format_amount(trend.net):>18}"
        else:
            line += f"{format_amount(trend.expenses):>18}"
        click.echo(line)
