"""Category management commands."""

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
from kostnad.domain.summary import SummaryService


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--details", is_flag=True, help="Show transaction counts and merchant patterns")
@click.pass_context
def list_categories(ctx, details: bool):
    """List all categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    with cli_errors(ctx, "list categories"):
        if details:
            rows = service.list_categories_with_details()
            categories = [row.category for row in rows]
        else:
            rows = []
            categories = service.list_categories()

    if not categories:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    for index, cat in enumerate(categories):
        icon = f"{cat.icon} " if cat.icon else ""
        default = " [default]" if cat.is_default else ""
        click.echo(f"  {icon}{cat.name} (ID: {cat.id}){default}")
        if details:
            row = rows[index]
            click.echo(f"      {row.transaction_count} transaction(s)")
            if row.merchant_patterns:
                click.echo(f"      Patterns: {', '.join(row.merchant_patterns)}")


@category_group.command("show")
@click.argument("category")
@date_range_options
@trend_options
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=5,
    show_default=True,
    help="Number of top merchants",
)
@click.pass_context
def show_category(
    ctx,
    category: str,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    timeframe: str,
    count: int,
    until: str | None,
    limit: int,
):
    """Show statistics, top merchants and trends for a category."""
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    end_ref = resolve_until(ctx, until)
    summary_service = SummaryService(db)

    with cli_errors(ctx, "show category"):
        existing = CategoryService(db).resolve_category(category)
        stats = summary_service.category_stats(existing.id, start, end)
        merchants = summary_service.category_top_merchants(existing.id, limit, start, end)
        trends = summary_service.category_trends(existing.id, timeframe, count, end_ref=end_ref)

    icon = f"{existing.icon} " if existing.icon else ""
    click.echo(f"\n{icon}{existing.name} (ID: {existing.id}), {format_range(start, end)}")
    if existing.description:
        click.echo(f"  {existing.description}")
    click.echo(f"  Transactions: {stats.transaction_count} across {stats.merchant_count} merchant(s)")
    click.echo(f"  Expenses:     {format_amount(stats.total_expenses)}")
    click.echo(f"  Income:       {format_amount(stats.total_income)}")
    click.echo(f"  Avg expense:  {format_amount(stats.average_expense)}")
    if stats.first_date is not None:
        click.echo(f"  Span:         {stats.first_date} to {stats.last_date}")

    if merchants:
        click.echo("\nTop merchants:")
        for rank, item in enumerate(merchants, start=1):
            click.echo(f"{rank:>3}. {item.merchant[:40]:<40} {item.count:>5} {format_amount(item.total):>18}")

    print_period_table(trends)


@category_group.command("create")
@click.argument("name")
@click.option("--description", help="Short description")
@click.option("--icon", help="Icon, e.g. an emoji")
@click.pass_context
def create_category(ctx, name: str, description: str | None, icon: str | None):
    """Create a new category."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    with cli_errors(ctx, "create category"):
        category_id = service.create_category(name=name, description=description, icon=icon)
    click.echo(f"Created category '{name.strip()}' (ID: {category_id})")


@category_group.command("rename")
@click.argument("category")
@click.argument("new_name")
@click.pass_context
def rename_category(ctx, category: str, new_name: str):
    """Rename a category given by name or ID."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    with cli_errors(ctx, "rename category"):
        existing = service.resolve_category(category)
        updated = service.update_category(existing.id, new_name)
    click.echo(f"Renamed category '{existing.name}' to '{updated.name}'")


@category_group.command("delete")
@click.argument("category")
@click.pass_context
def delete_category(ctx, category: str):
    """Delete a category given by name or ID.

    Default categories and categories that still have transactions cannot be
    deleted. Merchant mappings pointing at the category are removed.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    with cli_errors(ctx, "delete category"):
        existing = service.resolve_category(category)
        service.delete_category(existing.id)
    click.echo(f"Deleted category '{existing.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
