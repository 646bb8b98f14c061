"""Statement upload domain service."""

import logging
from pathlib import Path
from typing import Optional

from kostnad.database.base import Database
from kostnad.domain.categorizer import MerchantCategorizer
from kostnad.domain.entities import Upload, UploadResult
from kostnad.domain.errors import (
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
    upload_not_found,
)
from kostnad.domain.hashing import compute_transaction_hash
from kostnad.domain.statement_parser import parse_statement

logger = logging.getLogger(__name__)

EXCEL_SUFFIX = ".xlsx"


class StatementUploadService:
    """Service for importing bank statements."""

    def __init__(self, db: Database):
        """Initialize upload service.

        Args:
            db: Database instance
        """
        self.db = db

    def upload_statement(
        self,
        file_path: Optional[str],
        uploaded_by: Optional[str],
        file_name: Optional[str] = None,
    ) -> UploadResult:
        """Import a Handelsbanken .xlsx statement.

        Rows already stored (same date, amount and merchant) are skipped, so
        importing overlapping or identical exports is safe. New rows are
        auto-categorized from the merchant mappings.

        Args:
            file_path: Path to the .xlsx file
            uploaded_by: Acting user
            file_name: Name to record, defaults to the file's name

        Returns:
            UploadResult with counts and the statement's date range

        Raises:
            UnauthenticatedError: If no user is given
            ValidationError: If the file is missing, not .xlsx, unreadable or has no rows
        """
        if not uploaded_by:
            raise UnauthenticatedError("You must be signed in to upload statements")
        if not file_path:
            raise ValidationError("No file provided", field="file")

        path = Path(file_path)
        file_name = file_name or path.name
        if not file_name.lower().endswith(EXCEL_SUFFIX):
            raise ValidationError("Please select an Excel file (.xlsx)", field="file")
        if not path.is_file():
            raise ValidationError(f"File not found: {file_path}", field="file")

        statement = parse_statement(path)
        if not statement.rows:
            raise ValidationError("No valid transactions found in Excel file", field="file")

        upload_id = self.db.create_upload(
            file_name=file_name,
            uploaded_by=uploaded_by,
            date_range_start=statement.min_date,
            date_range_end=statement.max_date,
        )
        categorizer = MerchantCategorizer(self.db.list_merchant_mappings())

        new_count = 0
        skipped_count = 0
        categorized_count = 0
        for row in statement.rows:
            original_hash = compute_transaction_hash(row.date, row.amount, row.merchant)
            if self.db.transaction_hash_exists(original_hash):
                skipped_count += 1
                continue

            category_id = categorizer.find_category(row.merchant)
            self.db.create_transaction(
                date=row.date,
                merchant=row.merchant,
                amount=row.amount,
                original_hash=original_hash,
                balance=row.balance,
                category_id=category_id,
                upload_id=upload_id,
            )
            new_count += 1
            if category_id is not None:
                categorized_count += 1

        self.db.update_upload_transaction_count(upload_id, new_count)

        logger.info(
            "Imported %s for %s: %d new, %d skipped, %d categorized",
            file_name,
            uploaded_by,
            new_count,
            skipped_count,
            categorized_count,
        )
        return UploadResult(
            upload_id=upload_id,
            file_name=file_name,
            new_count=new_count,
            skipped_count=skipped_count,
            categorized_count=categorized_count,
            date_range_start=statement.min_date,
            date_range_end=statement.max_date,
        )

    def get_upload(self, upload_id: int) -> Optional[Upload]:
        """Get upload by ID."""
        return self.db.get_upload(upload_id)

    def list_uploads(self) -> list[Upload]:
        """List uploads, newest first."""
        return self.db.list_uploads()

    def delete_upload(self, upload_id: int, user: Optional[str]) -> int:
        """Delete an upload together with the transactions it created.

        Args:
            upload_id: Upload ID
            user: Acting user, must be the uploader

        Returns:
            Number of transactions deleted

        Raises:
            UnauthenticatedError: If no user is given
            NotFoundError: If the upload doesn't exist
            UnauthorizedError: If the user did not make the upload
        """
        if not user:
            raise UnauthenticatedError("You must be signed in to delete uploads")

        upload = self.db.get_upload(upload_id)
        if upload is None:
            raise upload_not_found(upload_id)
        if upload.uploaded_by != user:
            raise UnauthorizedError("Only the uploader can delete this upload")

        deleted = self.db.delete_upload(upload_id)
        logger.info("Deleted upload %d (%s) and %d transactions", upload_id, upload.file_name, deleted)
        return deleted
