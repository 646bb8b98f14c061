"""Transaction management commands."""

import click

from kostnad.cli.date_filters import date_range_options, resolve_cli_date_range
from kostnad.cli.error_handling import cli_errors
from kostnad.cli.formatting import format_amount, print_transaction_table
from kostnad.domain.category import CategoryService
from kostnad.domain.transaction import TransactionService
from kostnad.utils.amount_parser import parse_amount
from kostnad.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@date_range_options
@click.option("--category", help="Category name or ID")
@click.option("--uncategorized", is_flag=True, help="Show only uncategorized transactions")
@click.option("--merchant", help="Case-insensitive merchant text filter")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    category: str | None,
    uncategorized: bool,
    merchant: str | None,
):
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)

    if category and uncategorized:
        click.echo("Error: --category cannot be combined with --uncategorized", err=True)
        ctx.exit(1)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    with cli_errors(ctx, "list transactions"):
        category_id = None
        if category:
            category_id = category_service.resolve_category(category).id
        transactions = service.list_transactions(
            start_date=start,
            end_date=end,
            category_id=category_id,
            uncategorized=uncategorized,
            merchant=merchant,
        )
        category_names = {c.id: c.name for c in category_service.list_categories()}

    if not transactions:
        click.echo("No transactions found.")
        return

    print_transaction_table(transactions, category_names)


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show all fields of a transaction."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    with cli_errors(ctx, "load transaction"):
        txn = service.require_transaction(transaction_id)
        category = CategoryService(db).get_category(txn.category_id) if txn.category_id else None

    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Merchant: {txn.merchant}")
    click.echo(f"  Amount: {format_amount(txn.amount)}")
    if txn.balance is not None:
        click.echo(f"  Balance: {format_amount(txn.balance)}")
    click.echo(f"  Category: {category.name if category else 'Uncategorized'}")
    click.echo(f"  Upload: {txn.upload_id if txn.upload_id is not None else 'manual'}")
    click.echo(f"  Hash: {txn.original_hash}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--merchant", help="Merchant text")
@click.option("--amount", help="Transaction amount (e.g., 123.45 or -123.45)")
@click.option("--category", help="Category name or ID, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    date: str | None,
    merchant: str | None,
    amount: str | None,
    category: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Use --category "" to clear the
    category. The transaction is still recognised as a duplicate when its
    statement is imported again.

    Examples:
        kostnad transaction update 1 --amount -75.00
        kostnad transaction update 1 --category ""  # Clear category
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn_date = None
    if date is not None:
        try:
            txn_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    with cli_errors(ctx, "update transaction"):
        category_id = None
        clear_category = category == ""
        if category:
            category_id = CategoryService(db).resolve_category(category).id
        transaction_service.update_transaction(
            transaction_id=transaction_id,
            date=txn_date,
            merchant=merchant,
            amount=txn_amount,
            category_id=category_id,
            clear_category=clear_category,
        )
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        kostnad transaction delete 1
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    with cli_errors(ctx, "delete transaction"):
        transaction_service.require_transaction(transaction_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    with cli_errors(ctx, "delete transaction"):
        transaction_service.delete_transaction(transaction_id)
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
