"""Merchant mapping commands."""

import click

from kostnad.cli.date_filters import (
    date_range_options,
    resolve_cli_date_range,
    resolve_until,
    trend_options,
)
from kostnad.cli.error_handling import cli_errors
from kostnad.cli.formatting import format_amount, format_range, print_period_table
from kostnad.domain.category import CategoryService
from kostnad.domain.merchant import MerchantService


@click.group()
def merchant_group():
    """Manage merchant patterns used for auto-categorization."""
    pass


@merchant_group.command("list")
@date_range_options
@click.pass_context
def list_merchants(ctx, start_date: str | None, end_date: str | None, period: str | None):
    """List merchant patterns with their expenses in a period.

    Patterns are applied in ID order; the first match decides the category.
    """
    db = ctx.obj["db"]
    service = MerchantService(db)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    with cli_errors(ctx, "list merchants"):
        totals = service.merchants_with_totals(start, end)

    if not totals:
        click.echo("No merchant patterns found. Run 'init-categories' to create defaults.")
        return

    click.echo(f"\nMerchant patterns ({format_range(start, end)}):")
    click.echo(f"{'ID':<6} {'Pattern':<30} {'Category':<24} {'Count':>6} {'Expenses':>16}")
    click.echo("-" * 90)
    for item in totals:
        if item.mapping.is_multi_merchant:
            category_name = "(multi-merchant)"
        else:
            category_name = item.category_name or ""
        click.echo(
            f"{item.mapping.id:<6} {item.mapping.merchant_pattern[:30]:<30} "
            f"{category_name[:24]:<24} {item.transaction_count:>6} "
            f"{format_amount(item.total_expenses):>16}"
        )


@merchant_group.command("show")
@click.argument("pattern")
@date_range_options
@trend_options
@click.pass_context
def show_merchant(
    ctx,
    pattern: str,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    timeframe: str,
    count: int,
    until: str | None,
):
    """Show statistics and expense trends for a merchant pattern."""
    db = ctx.obj["db"]
    service = MerchantService(db)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    end_ref = resolve_until(ctx, until)

    with cli_errors(ctx, "show merchant"):
        mapping = service.require_mapping(pattern)
        stats = service.merchant_stats(mapping.merchant_pattern, start, end)
        trends = service.merchant_period_trends(
            mapping.merchant_pattern, timeframe, count, end_ref=end_ref
        )
        category = None
        if mapping.category_id is not None:
            category = CategoryService(db).get_category(mapping.category_id)

    if mapping.is_multi_merchant:
        assigns = "(multi-merchant)"
    else:
        assigns = category.name if category else "(no category)"
    click.echo(f"\n{mapping.merchant_pattern} -> {assigns}, {format_range(start, end)}")
    click.echo(f"  Transactions: {stats.transaction_count}")
    click.echo(f"  Expenses:     {format_amount(stats.total_expenses)}")
    click.echo(f"  Avg expense:  {format_amount(stats.average_expense)}")
    if stats.first_date is not None:
        click.echo(f"  Span:         {stats.first_date} to {stats.last_date}")

    print_period_table(trends, include_income=False)


@merchant_group.command("add")
@click.argument("pattern")
@click.option("--category", help="Category name or ID")
@click.option("--multi", is_flag=True, help="Mark as multi-merchant (no category)")
@click.pass_context
def add_merchant(ctx, pattern: str, category: str | None, multi: bool):
    """Add a merchant pattern.

    Examples:
        kostnad merchant add "ICA" --category "Mat & Dagligvaror"
        kostnad merchant add "AMAZON" --multi
    """
    db = ctx.obj["db"]
    service = MerchantService(db)

    with cli_errors(ctx, "add merchant pattern"):
        category_id = None
        if category is not None:
            category_id = CategoryService(db).resolve_category(category).id
        mapping_id = service.create_mapping(pattern, category_id, is_multi_merchant=multi)
    click.echo(f"Added merchant pattern '{pattern.strip()}' (ID: {mapping_id})")


@merchant_group.command("set-category")
@click.argument("pattern")
@click.argument("category", required=False)
@click.option("--clear", is_flag=True, help="Remove the category from the pattern")
@click.pass_context
def set_merchant_category(ctx, pattern: str, category: str | None, clear: bool):
    """Change the category a pattern assigns."""
    db = ctx.obj["db"]
    service = MerchantService(db)

    if clear == (category is not None):
        click.echo("Error: Give either a category or --clear", err=True)
        ctx.exit(1)

    with cli_errors(ctx, "update merchant pattern"):
        category_id = None
        if category is not None:
            category_id = CategoryService(db).resolve_category(category).id
        service.update_merchant_category(pattern, category_id)

    if clear:
        click.echo(f"Cleared category for '{pattern}'")
    else:
        click.echo(f"Pattern '{pattern}' now maps to '{category}'")


@merchant_group.command("multi")
@click.argument("pattern")
@click.option("--on/--off", "is_multi", default=True, help="Set or clear the multi-merchant flag")
@click.pass_context
def toggle_multi(ctx, pattern: str, is_multi: bool):
    """Set or clear the multi-merchant flag of a pattern."""
    db = ctx.obj["db"]
    service = MerchantService(db)

    with cli_errors(ctx, "update merchant pattern"):
        service.toggle_multi_merchant(pattern, is_multi)
    state = "marked" if is_multi else "unmarked"
    click.echo(f"Pattern '{pattern}' {state} as multi-merchant")


@merchant_group.command("delete")
@click.argument("pattern")
@click.pass_context
def delete_merchant(ctx, pattern: str):
    """Delete a merchant pattern."""
    db = ctx.obj["db"]
    service = MerchantService(db)

    with cli_errors(ctx, "delete merchant pattern"):
        service.delete_mapping(pattern)
    click.echo(f"Deleted merchant pattern '{pattern}'")


def register_commands(cli):
    """Register merchant commands with main CLI."""
    cli.add_command(merchant_group, name="merchant")
