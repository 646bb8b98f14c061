"""Transaction domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from kostnad.database.base import Database
from kostnad.domain.categorizer import MerchantCategorizer
from kostnad.domain.entities import Transaction
from kostnad.domain.errors import (
    ValidationError,
    category_not_found,
    duplicate_transaction,
    transaction_not_found,
)
from kostnad.domain.hashing import compute_transaction_hash

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_category(self, category_id: Optional[int]) -> None:
        if category_id is not None and self.db.get_category(category_id) is None:
            raise category_not_found(category_id)

    def create_transaction(
        self,
        date: date,
        merchant: str,
        amount: Decimal,
        balance: Optional[Decimal] = None,
        category_id: Optional[int] = None,
    ) -> int:
        """Create a manually entered transaction.

        Args:
            date: Transaction date
            merchant: Merchant text
            amount: Signed amount, negative for expenses
            balance: Optional account balance after the transaction
            category_id: Optional category ID

        Returns:
            Transaction ID

        Raises:
            ValidationError: If merchant is empty or the transaction already exists
            NotFoundError: If the category doesn't exist
        """
        merchant = (merchant or "").strip()
        if not merchant:
            raise ValidationError("Merchant is required", field="merchant")
        self._check_category(category_id)

        original_hash = compute_transaction_hash(date, amount, merchant)
        if self.db.transaction_hash_exists(original_hash):
            raise duplicate_transaction()

        return self.db.create_transaction(
            date=date,
            merchant=merchant,
            amount=amount,
            original_hash=original_hash,
            balance=balance,
            category_id=category_id,
        )

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> Transaction:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise transaction_not_found(transaction_id)
        return txn

    def categorize_transaction(self, transaction_id: int, category_id: int) -> int:
        """Categorize a transaction and remember the choice for its merchant.

        Every uncategorized transaction with the same merchant text gets the
        category too, and a mapping ``merchant -> category`` is stored so that
        future uploads are categorized automatically. Merchants covered by a
        multi-merchant pattern are categorized one transaction at a time.

        Args:
            transaction_id: Transaction ID
            category_id: Category ID

        Returns:
            Number of transactions updated

        Raises:
            NotFoundError: If the transaction or category doesn't exist
        """
        txn = self.require_transaction(transaction_id)
        self._check_category(category_id)

        categorizer = MerchantCategorizer(self.db.list_merchant_mappings())
        if categorizer.is_multi_merchant(txn.merchant):
            self.db.update_transaction_category(transaction_id, category_id)
            logger.debug("Categorized multi-merchant transaction %d only", transaction_id)
            return 1

        updated = 0
        if txn.category_id is not None:
            self.db.update_transaction_category(transaction_id, category_id)
            updated = 1
        updated += self.db.categorize_uncategorized_by_merchant(txn.merchant, category_id)
        self.db.upsert_merchant_mapping(txn.merchant, category_id, is_multi_merchant=False)

        logger.info(
            "Categorized %d transaction(s) for merchant '%s' as category %d",
            updated,
            txn.merchant,
            category_id,
        )
        return updated

    def update_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Change the category of a single transaction without touching mappings.

        Args:
            transaction_id: Transaction ID
            category_id: Category ID, or None to clear

        Raises:
            NotFoundError: If the transaction or category doesn't exist
        """
        self.require_transaction(transaction_id)
        self._check_category(category_id)
        self.db.update_transaction_category(transaction_id, category_id)

    def update_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        merchant: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category_id: Optional[int] = None,
        clear_category: bool = False,
    ) -> None:
        """Update transaction fields.

        The stored original hash keeps pointing at the imported values, so an
        edited transaction is still recognised when the statement is uploaded
        again.

        Args:
            transaction_id: Transaction ID to update
            date: Optional new date
            merchant: Optional new merchant text
            amount: Optional new amount
            category_id: Optional new category ID
            clear_category: If True, remove the category

        Raises:
            ValidationError: If merchant is blank or both category options are given
            NotFoundError: If the transaction or category doesn't exist
        """
        self.require_transaction(transaction_id)

        if merchant is not None:
            merchant = merchant.strip()
            if not merchant:
                raise ValidationError("Merchant cannot be empty", field="merchant")
        if clear_category and category_id is not None:
            raise ValidationError(
                "Cannot set and clear the category at the same time", field="category"
            )
        self._check_category(category_id)

        self.db.update_transaction(
            transaction_id,
            date=date,
            merchant=merchant,
            amount=amount,
            category_id=None if clear_category else category_id,
            update_category=clear_category or category_id is not None,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        uncategorized: bool = False,
        merchant: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions, newest first.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            category_id: Optional category filter
            uncategorized: Only transactions without a category
            merchant: Optional case-insensitive merchant substring

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be before end date", field="date")
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            uncategorized=uncategorized,
            merchant=merchant,
        )

    def list_uncategorized(self) -> list[Transaction]:
        """Transactions waiting for manual review."""
        return self.db.list_transactions(uncategorized=True)
