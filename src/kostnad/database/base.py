"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

from kostnad.domain.entities import (
    Category,
    MerchantMapping,
    Transaction,
    Upload,
)


class Database(ABC):
    """Abstract database interface for kostnad."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        is_default: bool = False,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by its unique name."""
        pass

    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories ordered by name."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Update the given category fields."""
        pass

    @abstractmethod
    def delete_category(self, category_id: int) -> None:
        """Delete a category together with the merchant mappings pointing at it."""
        pass

    @abstractmethod
    def get_category_transaction_count(self, category_id: int) -> int:
        """Count transactions linked to a category."""
        pass

    # Upload operations
    @abstractmethod
    def create_upload(
        self,
        file_name: str,
        uploaded_by: str,
        date_range_start: Optional[date] = None,
        date_range_end: Optional[date] = None,
    ) -> int:
        """Create an upload record. Returns upload ID."""
        pass

    @abstractmethod
    def get_upload(self, upload_id: int) -> Optional[Upload]:
        """Get upload by ID."""
        pass

    @abstractmethod
    def list_uploads(self) -> list[Upload]:
        """List uploads, newest first."""
        pass

    @abstractmethod
    def update_upload_transaction_count(self, upload_id: int, count: int) -> None:
        """Set the number of transactions an upload inserted."""
        pass

    @abstractmethod
    def delete_upload(self, upload_id: int) -> int:
        """Delete an upload and its transactions. Returns deleted transaction count."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        date: date,
        merchant: str,
        amount: Decimal,
        original_hash: str,
        balance: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        upload_id: Optional[int] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def transaction_hash_exists(self, original_hash: str) -> bool:
        """Check if a transaction with the given original hash exists."""
        pass

    @abstractmethod
    def update_transaction_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Update transaction category."""
        pass

    @abstractmethod
    def categorize_uncategorized_by_merchant(self, merchant: str, category_id: int) -> int:
        """Assign a category to every uncategorized transaction with this exact merchant.

        Returns the number of transactions updated.
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        merchant: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        update_category: bool = False,
    ) -> None:
        """Update transaction fields. The original hash is never changed."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        uncategorized: bool = False,
        merchant: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            start_date: Optional inclusive start date filter
            end_date: Optional inclusive end date filter
            category_id: Optional category ID filter
            uncategorized: If True, only return transactions without a category
            merchant: Optional case-insensitive substring filter on merchant
        """
        pass

    # Merchant mapping operations
    @abstractmethod
    def list_merchant_mappings(self) -> list[MerchantMapping]:
        """List merchant mappings in mapping order (ascending ID)."""
        pass

    @abstractmethod
    def get_merchant_mapping(self, merchant_pattern: str) -> Optional[MerchantMapping]:
        """Get a merchant mapping by its exact pattern."""
        pass

    @abstractmethod
    def upsert_merchant_mapping(
        self,
        merchant_pattern: str,
        category_id: Optional[int],
        is_multi_merchant: bool = False,
    ) -> int:
        """Create a mapping or update the existing one with the same pattern.

        Returns mapping ID.
        """
        pass

    @abstractmethod
    def delete_merchant_mapping(self, merchant_pattern: str) -> bool:
        """Delete the mapping with this pattern. Returns True if one was deleted."""
        pass
