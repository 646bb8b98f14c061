"""Add transaction command."""

import click

from kostnad.cli.error_handling import cli_errors
from kostnad.cli.formatting import format_amount
from kostnad.domain.category import CategoryService
from kostnad.domain.transaction import TransactionService
from kostnad.utils.amount_parser import parse_amount
from kostnad.utils.date_parser import parse_date


@click.command("add")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--merchant", required=True, help="Merchant text")
@click.option(
    "--amount", required=True, help="Transaction amount (e.g., 123.45 or -123.45)"
)
@click.option("--balance", help="Account balance after the transaction")
@click.option("--category", help="Category name or ID")
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    merchant: str,
    amount: str,
    balance: str | None,
    category: str | None,
):
    """Add a transaction manually.

    Examples:
        kostnad add --date 2026-01-15 --merchant "Bageriet" --amount -45.00
        kostnad add --date today --merchant "Lön" --amount 32000 --category Inkomst
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
        txn_balance = parse_amount(balance) if balance is not None else None
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    with cli_errors(ctx, "create transaction"):
        category_obj = None
        if category:
            category_obj = CategoryService(db).resolve_category(category)
        transaction_id = transaction_service.create_transaction(
            date=txn_date,
            merchant=merchant,
            amount=txn_amount,
            balance=txn_balance,
            category_id=category_obj.id if category_obj else None,
        )

    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Merchant: {merchant.strip()}")
    click.echo(f"  Amount: {format_amount(txn_amount)}")
    if category_obj:
        click.echo(f"  Category: {category_obj.name}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
