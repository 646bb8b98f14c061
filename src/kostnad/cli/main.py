"""Main CLI entry point."""

import click

from kostnad.config import DB_PATH_ENV, LOG_LEVEL_ENV, USER_ENV, configure_logging
from kostnad.database.factories import create_database

from kostnad.cli.commands import (
    add,
    categorize,
    category,
    import_cmd,
    init_categories,
    merchant,
    review,
    summary,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--user",
    help=f"Acting user for uploads (defaults to {USER_ENV} environment variable)",
    envvar=USER_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help=f"Log level (defaults to {LOG_LEVEL_ENV} or WARNING)",
    envvar=LOG_LEVEL_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, log_level: str | None):
    """Kostnad - household expense tracking.

    Import Handelsbanken statements, categorize purchases by merchant and
    follow spending over time.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)
    ctx.obj["user"] = user

    # a bare "kostnad" only prints usage
    if ctx.invoked_subcommand is not None:
        db = create_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
import_cmd.register_commands(cli)
init_categories.register_commands(cli)
category.register_commands(cli)
merchant.register_commands(cli)
add.register_commands(cli)
categorize.register_commands(cli)
transaction.register_commands(cli)
review.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
