"""Statement import and upload management commands."""

import click

from kostnad.cli.error_handling import cli_errors
from kostnad.cli.formatting import format_range
from kostnad.domain.upload import StatementUploadService


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--name", "file_name", help="Name to record for the upload (defaults to the file name)")
@click.pass_context
def import_statement(ctx, statement_file: str, file_name: str | None):
    """Import a Handelsbanken statement (.xlsx).

    Rows that are already stored are skipped, so overlapping exports can be
    imported safely.

    Examples:
        kostnad --user anna import Transaktioner_2026-01-31.xlsx
    """
    db = ctx.obj["db"]
    service = StatementUploadService(db)

    with cli_errors(ctx, "import statement"):
        result = service.upload_statement(
            statement_file, uploaded_by=ctx.obj.get("user"), file_name=file_name
        )

    click.echo("\nImport complete:")
    click.echo(f"  Upload ID: {result.upload_id}")
    click.echo(f"  Period: {format_range(result.date_range_start, result.date_range_end)}")
    click.echo(f"  Imported: {result.new_count} transactions")
    click.echo(f"  Skipped: {result.skipped_count} duplicates")
    click.echo(f"  Auto-categorized: {result.categorized_count}")
    uncategorized = result.new_count - result.categorized_count
    if uncategorized:
        click.echo(f"\n{uncategorized} transaction(s) need review. Run 'kostnad review'.")


@click.group()
def upload_group():
    """Manage imported statements."""
    pass


@upload_group.command("list")
@click.pass_context
def list_uploads(ctx):
    """List imported statements, newest first."""
    db = ctx.obj["db"]
    service = StatementUploadService(db)

    with cli_errors(ctx, "list uploads"):
        uploads = service.list_uploads()

    if not uploads:
        click.echo("No uploads found.")
        return

    click.echo(f"\n{'ID':<6} {'File':<36} {'By':<12} {'Count':>6}  Period")
    click.echo("-" * 90)
    for upload in uploads:
        click.echo(
            f"{upload.id:<6} {upload.file_name[:36]:<36} {upload.uploaded_by[:12]:<12} "
            f"{upload.transaction_count:>6}  "
            f"{format_range(upload.date_range_start, upload.date_range_end)}"
        )


@upload_group.command("delete")
@click.argument("upload_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_upload(ctx, upload_id: int, yes: bool):
    """Delete an upload and every transaction it imported."""
    db = ctx.obj["db"]
    service = StatementUploadService(db)

    if not yes and not click.confirm(
        f"Delete upload {upload_id} and its transactions?"
    ):
        click.echo("Deletion cancelled.")
        return

    with cli_errors(ctx, "delete upload"):
        deleted = service.delete_upload(upload_id, user=ctx.obj.get("user"))
    click.echo(f"Deleted upload {upload_id} ({deleted} transactions)")


def register_commands(cli):
    """Register import and upload commands with main CLI."""
    cli.add_command(import_statement)
    cli.add_command(upload_group, name="uploads")
