"""CLI error handling helpers."""

import logging
from contextlib import contextmanager
from typing import Iterator

import click
from sqlalchemy.exc import SQLAlchemyError

from kostnad.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_database_error(ctx: click.Context, action: str, error: SQLAlchemyError) -> None:
    """Log an unexpected database error and exit with a generic message."""
    logger.error("Failed to %s: %s", action, error, exc_info=error)
    click.echo(f"Error: Failed to {action}", err=True)
    ctx.exit(1)


@contextmanager
def cli_errors(ctx: click.Context, action: str) -> Iterator[None]:
    """Turn domain and database errors raised in the block into CLI exits."""
    try:
        yield
    except DomainError as e:
        handle_domain_error(ctx, e)
    except SQLAlchemyError as e:
        handle_database_error(ctx, action, e)
