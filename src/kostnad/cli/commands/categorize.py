"""Categorization commands."""

import click

from kostnad.cli.error_handling import cli_errors
from kostnad.domain.category import CategoryService
from kostnad.domain.errors import DomainError
from kostnad.domain.merchant import MerchantService
from kostnad.domain.transaction import TransactionService


@click.command("categorize")
@click.argument("transaction_ids", nargs=-1, required=True, type=int)
@click.argument("category", nargs=1)
@click.option(
    "--only",
    is_flag=True,
    help="Change only the given transactions; don't learn the merchant",
)
@click.pass_context
def categorize_transaction(ctx, transaction_ids: tuple[int, ...], category: str, only: bool):
    """Assign a category to one or more transactions.

    By default the choice is remembered for the merchant: other uncategorized
    transactions from the same merchant get the category too, and future
    imports are categorized automatically.

    Examples:
        kostnad categorize 12 "Mat & Dagligvaror"
        kostnad categorize 12 13 14 Transport --only
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    # Validate category exists before processing any transactions
    with cli_errors(ctx, "categorize transactions"):
        category_obj = CategoryService(db).resolve_category(category)

    unique_ids = list(dict.fromkeys(transaction_ids))

    successes = []
    errors = []
    if len(unique_ids) > 1:
        click.echo(f"Categorizing {len(unique_ids)} transactions as '{category_obj.name}'...")

    for txn_id in unique_ids:
        try:
            if only:
                service.update_category(txn_id, category_obj.id)
                updated = 1
            else:
                updated = service.categorize_transaction(txn_id, category_obj.id)
            successes.append(txn_id)
            extra = f" ({updated} updated)" if updated > 1 else ""
            if len(unique_ids) == 1:
                click.echo(f"Transaction {txn_id} categorized as '{category_obj.name}'{extra}")
            else:
                click.echo(f"✓ Transaction {txn_id} categorized{extra}")
        except DomainError as e:
            errors.append((txn_id, str(e)))
            if len(unique_ids) > 1:
                click.echo(f"✗ Transaction {txn_id}: {e}")

    if len(unique_ids) > 1:
        click.echo(f"\nResults: {len(successes)} succeeded, {len(errors)} failed")
        if errors:
            ctx.exit(1)
    elif errors:
        click.echo(f"Error: {errors[0][1]}", err=True)
        ctx.exit(1)


@click.command("mark-multi")
@click.argument("transaction_id", type=int)
@click.pass_context
def mark_multi(ctx, transaction_id: int):
    """Mark a transaction's merchant as multi-merchant.

    Transactions from the merchant are no longer auto-categorized and each
    one is reviewed by hand.
    """
    db = ctx.obj["db"]
    service = MerchantService(db)

    with cli_errors(ctx, "mark merchant"):
        merchant = service.mark_multi_merchant(transaction_id)
    click.echo(f"Marked '{merchant}' as multi-merchant")


@click.command("unmark-multi")
@click.argument("transaction_id", type=int)
@click.pass_context
def unmark_multi(ctx, transaction_id: int):
    """Remove the merchant pattern for a transaction's merchant."""
    db = ctx.obj["db"]
    service = MerchantService(db)

    with cli_errors(ctx, "unmark merchant"):
        removed = service.unmark_multi_merchant(transaction_id)
    if removed:
        click.echo(f"Removed merchant pattern for transaction {transaction_id}")
    else:
        click.echo(f"No merchant pattern found for transaction {transaction_id}")


def register_commands(cli):
    """Register categorization commands with main CLI."""
    cli.add_command(categorize_transaction)
    cli.add_command(mark_multi)
    cli.add_command(unmark_multi)
