"""CLI helpers for date ranges and trend periods."""

from datetime import date
from typing import Callable

import click

from kostnad.domain.entities import Timeframe
from kostnad.utils.date_parser import PERIODS, get_date_range, parse_date

TIMEFRAMES = tuple(t.value for t in Timeframe)


def date_range_options(func: Callable) -> Callable:
    """Add --start-date, --end-date and --period options to a command."""
    func = click.option(
        "--period",
        type=click.Choice(PERIODS, case_sensitive=False),
        help="Named period instead of explicit dates",
    )(func)
    func = click.option(
        "--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')"
    )(func)
    func = click.option(
        "--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')"
    )(func)
    return func


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a named period or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        return get_date_range(period)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range

    return start, end


def trend_options(func: Callable) -> Callable:
    """Add --timeframe, --count and --until options to a trend command."""
    func = click.option("--until", help="Date inside the last period (defaults to today)")(func)
    func = click.option(
        "--count",
        type=click.IntRange(min=1),
        default=6,
        show_default=True,
        help="Number of periods",
    )(func)
    func = click.option(
        "--timeframe",
        type=click.Choice(TIMEFRAMES, case_sensitive=False),
        default="month",
        show_default=True,
        help="Period length",
    )(func)
    return func


def resolve_until(ctx, until: str | None) -> date | None:
    """Parse the --until option, exiting on an invalid date."""
    if not until:
        return None
    try:
        return parse_date(until)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)
