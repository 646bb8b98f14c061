"""Review queue command."""

import click

from kostnad.cli.error_handling import cli_errors
from kostnad.cli.formatting import format_amount
from kostnad.domain.transaction import TransactionService


@click.command("review")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum rows to show")
@click.pass_context
def review(ctx, limit: int):
    """List transactions that still need a category.

    Categorize them with 'kostnad categorize ID CATEGORY'.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    with cli_errors(ctx, "load review queue"):
        pending = service.list_uncategorized()

    if not pending:
        click.echo("Nothing to review. All transactions are categorized.")
        return

    click.echo(f"\n{len(pending)} transaction(s) need a category:")
    click.echo(f"{'ID':<6} {'Date':<12} {'Amount':>16}  Merchant")
    click.echo("-" * 80)
    for txn in pending[:limit]:
        click.echo(f"{txn.id:<6} {str(txn.date):<12} {format_amount(txn.amount):>16}  {txn.merchant}")
    if len(pending) > limit:
        click.echo(f"... and {len(pending) - limit} more")


def register_commands(cli):
    """Register review command with main CLI."""
    cli.add_command(review)
