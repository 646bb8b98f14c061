"""Summary commands."""

import click

from kostnad.cli.date_filters import (
    date_range_options,
    resolve_cli_date_range,
    resolve_until,
    trend_options,
)
from kostnad.cli.error_handling import cli_errors
from kostnad.cli.formatting import format_amount, format_range, print_period_table
from kostnad.domain.summary import SummaryService


@click.command("summary")
@date_range_options
@click.pass_context
def summary(ctx, start_date: str | None, end_date: str | None, period: str | None):
    """Show income, expenses and totals per category."""
    db = ctx.obj["db"]
    service = SummaryService(db)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    with cli_errors(ctx, "build summary"):
        report = service.build_summary(start, end)

    click.echo(f"\nSummary ({format_range(start, end)}):")
    click.echo(f"  Income:   {format_amount(report.income):>18}")
    click.echo(f"  Expenses: {format_amount(report.expenses):>18}")
    click.echo(f"  Net:      {format_amount(report.net):>18}")
    if report.uncategorized_count:
        click.echo(f"  Uncategorized: {report.uncategorized_count} transaction(s)")

    if not report.category_totals:
        click.echo("\nNo transactions found.")
        return

    click.echo(f"\n{'Category':<40} {'Count':>6} {'Total':>20}")
    click.echo("-" * 68)
    for item in report.category_totals:
        name = item.category_name or "Uncategorized"
        click.echo(f"{name[:40]:<40} {item.count:>6} {format_amount(item.total):>20}")


@click.command("trends")
@trend_options
@click.pass_context
def trends(ctx, timeframe: str, count: int, until: str | None):
    """Show income and expenses for the last few weeks, months or years."""
    db = ctx.obj["db"]
    service = SummaryService(db)
    end_ref = resolve_until(ctx, until)

    with cli_errors(ctx, "build trends"):
        periods = service.period_trends(timeframe, count, end_ref=end_ref)

    print_period_table(periods)


@click.command("category-trends")
@trend_options
@click.pass_context
def category_trends(ctx, timeframe: str, count: int, until: str | None):
    """Show expenses per category for the last few periods."""
    db = ctx.obj["db"]
    service = SummaryService(db)
    end_ref = resolve_until(ctx, until)

    with cli_errors(ctx, "build category trends"):
        results = service.category_period_trends(timeframe, count, end_ref=end_ref)

    if not results:
        click.echo("No expenses found.")
        return

    labels = [p.period_key for p in results[0].periods]
    click.echo(f"\n{'Category':<24}" + "".join(f" {label:>14}" for label in labels))
    click.echo("-" * (24 + 15 * len(labels)))
    for trend in results:
        name = trend.category_name or "Uncategorized"
        cells = "".join(f" {p.expenses:>14,.2f}" for p in trend.periods)
        click.echo(f"{name[:24]:<24}{cells}")


@click.command("top-merchants")
@date_range_options
@click.option("--limit", type=click.IntRange(min=1), default=10, show_default=True, help="Number of merchants")
@click.pass_context
def top_merchants(
    ctx, start_date: str | None, end_date: str | None, period: str | None, limit: int
):
    """Show the merchants with the highest expenses."""
    db = ctx.obj["db"]
    service = SummaryService(db)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    with cli_errors(ctx, "list top merchants"):
        merchants = service.top_merchants(start, end, limit=limit)

    if not merchants:
        click.echo("No expenses found.")
        return

    click.echo(f"\nTop merchants ({format_range(start, end)}):")
    for rank, item in enumerate(merchants, start=1):
        click.echo(f"{rank:>3}. {item.merchant[:40]:<40} {item.count:>5} {format_amount(item.total):>18}")


@click.command("upcoming")
@click.option("--as-of", "as_of", help="Reference date (defaults to today)")
@click.pass_context
def upcoming(ctx, as_of: str | None):
    """Show yearly expenses expected in the next 60 days.

    A merchant counts as yearly when two expenses 10 to 14 months apart
    differ by at most 20%.
    """
    db = ctx.obj["db"]
    service = SummaryService(db)
    today = resolve_until(ctx, as_of)

    with cli_errors(ctx, "predict upcoming expenses"):
        expenses = service.upcoming_expenses(today=today)

    if not expenses:
        click.echo("No upcoming yearly expenses.")
        return

    click.echo(f"\n{'Expected':<12} {'In':>6}  {'Merchant':<32} {'Category':<20} {'Amount':>16}")
    click.echo("-" * 92)
    for item in expenses:
        click.echo(
            f"{str(item.expected_date):<12} {item.days_until:>4} d  {item.merchant[:32]:<32} "
            f"{(item.category_name or '')[:20]:<20} {format_amount(item.expected_amount):>16}"
        )


def register_commands(cli):
    """Register summary commands with main CLI."""
    cli.add_command(summary)
    cli.add_command(trends)
    cli.add_command(top_merchants)
    cli.add_command(category_trends)
    cli.add_command(upcoming)
