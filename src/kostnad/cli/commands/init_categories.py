"""Initialize default categories and merchant mappings."""

import click

from kostnad.cli.error_handling import cli_errors
from kostnad.domain.category import CategoryService


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Create the default categories and merchant mappings.

    Safe to run again: existing categories and patterns are updated instead
    of duplicated.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    click.echo("Creating default categories...")
    with cli_errors(ctx, "seed default categories"):
        created, mappings = service.seed_defaults()

    click.echo(f"Created {created} categories and seeded {mappings} merchant mappings.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
