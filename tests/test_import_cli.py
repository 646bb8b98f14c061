"""Tests for import, upload and global CLI options."""

from sqlalchemy.exc import SQLAlchemyError

from kostnad.cli.main import cli
from kostnad.database.sqlalchemy_db import SQLAlchemyDatabase


def test_help_does_not_touch_database(cli_runner, tmp_path):
    db_path = tmp_path / "never.db"

    result = cli_runner.invoke(cli, ["--db-path", str(db_path), "--help"])

    assert result.exit_code == 0
    assert "import" in result.output
    assert not db_path.exists()


def test_import(cli_runner, temp_db, make_statement, january_rows):
    path = make_statement(january_rows, name="jan.xlsx")

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "anna", "import", path]
    )

    assert result.exit_code == 0
    assert "Imported: 4 transactions" in result.output
    assert "Skipped: 0 duplicates" in result.output
    assert "Period: 2026-01-03 to 2026-01-28" in result.output
    assert "4 transaction(s) need review" in result.output


def test_import_twice_skips_everything(cli_runner, temp_db, make_statement, january_rows):
    path = make_statement(january_rows)
    args = ["--db-path", temp_db.database_path, "--user", "anna", "import", path]
    cli_runner.invoke(cli, args)

    result = cli_runner.invoke(cli, args)

    assert result.exit_code == 0
    assert "Imported: 0 transactions" in result.output
    assert "Skipped: 4 duplicates" in result.output


def test_import_user_from_env(cli_runner, temp_db, make_statement, january_rows):
    path = make_statement(january_rows)

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "import", path],
        env={"KOSTNAD_USER": "bertil"},
    )

    assert result.exit_code == 0


def test_import_without_user(cli_runner, temp_db, make_statement, january_rows, monkeypatch):
    monkeypatch.delenv("KOSTNAD_USER", raising=False)
    path = make_statement(january_rows)

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "import", path])

    assert result.exit_code == 1
    assert "Error: You must be signed in" in result.output


def test_import_wrong_extension(cli_runner, temp_db, tmp_path):
    path = tmp_path / "statement.csv"
    path.write_text("a;b;c\n")

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "anna", "import", str(path)]
    )

    assert result.exit_code == 1
    assert "Error: Please select an Excel file (.xlsx)" in result.output


def test_import_no_rows(cli_runner, temp_db, make_statement):
    path = make_statement([])

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "anna", "import", path]
    )

    assert result.exit_code == 1
    assert "Error: No valid transactions found in Excel file" in result.output


def test_uploads_list_and_delete(cli_runner, temp_db, make_statement, january_rows):
    path = make_statement(january_rows, name="jan.xlsx")
    base = ["--db-path", temp_db.database_path, "--user", "anna"]
    cli_runner.invoke(cli, base + ["import", path])

    listed = cli_runner.invoke(cli, base + ["uploads", "list"])
    assert listed.exit_code == 0
    assert "jan.xlsx" in listed.output
    assert "anna" in listed.output

    upload_id = temp_db.list_uploads()[0].id
    deleted = cli_runner.invoke(cli, base + ["uploads", "delete", str(upload_id), "--yes"])
    assert deleted.exit_code == 0
    assert f"Deleted upload {upload_id} (4 transactions)" in deleted.output


def test_uploads_delete_by_other_user(cli_runner, temp_db, make_statement, january_rows):
    path = make_statement(january_rows)
    cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", "anna", "import", path]
    )
    upload_id = temp_db.list_uploads()[0].id

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "--user", "bertil", "uploads", "delete", str(upload_id), "--yes"],
    )

    assert result.exit_code == 1
    assert "Error: Only the uploader can delete this upload" in result.output


def test_uploads_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "uploads", "list"])

    assert result.exit_code == 0
    assert "No uploads found." in result.output


def test_database_errors_are_reported(cli_runner, temp_db, monkeypatch):
    def broken(self):
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(SQLAlchemyDatabase, "list_categories", broken)

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "category", "list"])

    assert result.exit_code == 1
    assert "Error: Failed to list categories" in result.output
