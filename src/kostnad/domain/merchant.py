"""Merchant mapping domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Union

from kostnad.database.base import Database
from kostnad.domain.categorizer import pattern_matches
from kostnad.domain.entities import (
    MerchantMapping,
    MerchantStats,
    MerchantTotal,
    PeriodTrend,
    Timeframe,
    Transaction,
)
from kostnad.domain.errors import (
    ConstraintError,
    ValidationError,
    category_not_found,
    merchant_mapping_not_found,
    transaction_not_found,
)
from kostnad.domain.summary import bucket_by_period, build_periods

logger = logging.getLogger(__name__)


class MerchantService:
    """Service for managing merchant pattern mappings."""

    def __init__(self, db: Database):
        """Initialize merchant service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_mappings(self) -> list[MerchantMapping]:
        """List mappings in the order they are applied."""
        return self.db.list_merchant_mappings()

    def require_mapping(self, merchant_pattern: str) -> MerchantMapping:
        """Get mapping by pattern or raise NotFoundError."""
        mapping = self.db.get_merchant_mapping(merchant_pattern)
        if mapping is None:
            raise merchant_mapping_not_found(merchant_pattern)
        return mapping

    def create_mapping(
        self,
        merchant_pattern: str,
        category_id: Optional[int] = None,
        is_multi_merchant: bool = False,
    ) -> int:
        """Create a merchant mapping.

        Args:
            merchant_pattern: Case-insensitive substring matched against merchants
            category_id: Category to assign, required unless multi-merchant
            is_multi_merchant: Mark the pattern as covering several kinds of purchases

        Returns:
            Mapping ID

        Raises:
            ValidationError: If the pattern is empty or the category choice is invalid
            NotFoundError: If the category doesn't exist
            ConstraintError: If the pattern already has a mapping
        """
        merchant_pattern = (merchant_pattern or "").strip()
        if not merchant_pattern:
            raise ValidationError("Merchant pattern is required", field="merchant_pattern")
        if is_multi_merchant and category_id is not None:
            raise ValidationError(
                "Multi-merchant patterns cannot have a category", field="category"
            )
        if not is_multi_merchant and category_id is None:
            raise ValidationError("Category is required", field="category")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise category_not_found(category_id)
        if self.db.get_merchant_mapping(merchant_pattern) is not None:
            raise ConstraintError(
                f"Merchant mapping '{merchant_pattern}' already exists",
                constraint="unique_pattern",
            )

        return self.db.upsert_merchant_mapping(
            merchant_pattern, category_id, is_multi_merchant=is_multi_merchant
        )

    def update_merchant_category(
        self, merchant_pattern: str, category_id: Optional[int]
    ) -> None:
        """Point a mapping at another category, or at none.

        Raises:
            NotFoundError: If the mapping or category doesn't exist
            ValidationError: If the mapping is multi-merchant
        """
        mapping = self.require_mapping(merchant_pattern)
        if mapping.is_multi_merchant:
            raise ValidationError(
                "Cannot set a category on a multi-merchant pattern", field="category"
            )
        if category_id is not None and self.db.get_category(category_id) is None:
            raise category_not_found(category_id)
        self.db.upsert_merchant_mapping(merchant_pattern, category_id, is_multi_merchant=False)

    def toggle_multi_merchant(self, merchant_pattern: str, is_multi_merchant: bool) -> None:
        """Set or clear the multi-merchant flag on an existing mapping.

        Marking a pattern multi-merchant drops its category. Clearing the flag
        leaves the mapping without a category until one is set.

        Raises:
            NotFoundError: If the mapping doesn't exist
        """
        mapping = self.require_mapping(merchant_pattern)
        category_id = None if is_multi_merchant else mapping.category_id
        self.db.upsert_merchant_mapping(
            merchant_pattern, category_id, is_multi_merchant=is_multi_merchant
        )

    def mark_multi_merchant(self, transaction_id: int) -> str:
        """Replace the mapping for a transaction's merchant with a multi-merchant one.

        Returns:
            The merchant text used as pattern

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise transaction_not_found(transaction_id)

        self.db.delete_merchant_mapping(txn.merchant)
        self.db.upsert_merchant_mapping(txn.merchant, None, is_multi_merchant=True)
        logger.info("Marked '%s' as multi-merchant", txn.merchant)
        return txn.merchant

    def unmark_multi_merchant(self, transaction_id: int) -> bool:
        """Remove the mapping for a transaction's merchant.

        Returns:
            True if a mapping was removed

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise transaction_not_found(transaction_id)
        return self.db.delete_merchant_mapping(txn.merchant)

    def delete_mapping(self, merchant_pattern: str) -> None:
        """Delete a mapping.

        Raises:
            NotFoundError: If the mapping doesn't exist
        """
        if not self.db.delete_merchant_mapping(merchant_pattern):
            raise merchant_mapping_not_found(merchant_pattern)

    def merchants_with_totals(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[MerchantTotal]:
        """Expense totals per mapping for a date range.

        A transaction counts towards every pattern it matches. Totals are
        positive numbers.

        Returns:
            One MerchantTotal per mapping, highest total first
        """
        mappings = self.db.list_merchant_mappings()
        category_names = {c.id: c.name for c in self.db.list_categories()}
        expenses = [
            txn
            for txn in self.db.list_transactions(start_date=start_date, end_date=end_date)
            if txn.amount < 0
        ]

        results = []
        for mapping in mappings:
            matching = [
                txn for txn in expenses if pattern_matches(mapping.merchant_pattern, txn.merchant)
            ]
            results.append(
                MerchantTotal(
                    mapping=mapping,
                    category_name=category_names.get(mapping.category_id),
                    total_expenses=sum((-txn.amount for txn in matching), Decimal("0")),
                    transaction_count=len(matching),
                )
            )

        results.sort(key=lambda r: r.total_expenses, reverse=True)
        return results

    def _matching(
        self,
        merchant_pattern: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        merchant_pattern = (merchant_pattern or "").strip()
        if not merchant_pattern:
            raise ValidationError("Merchant pattern is required", field="merchant_pattern")
        if start_date is not None and end_date is not None and start_date > end_date:
            raise ValidationError("Start date must be before end date", field="date")
        return [
            txn
            for txn in self.db.list_transactions(start_date=start_date, end_date=end_date)
            if pattern_matches(merchant_pattern, txn.merchant)
        ]

    def merchant_stats(
        self,
        merchant_pattern: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> MerchantStats:
        """Aggregate the transactions a pattern matches.

        The count and date span cover every matching transaction; the total
        and average cover expenses only.
        """
        matching = self._matching(merchant_pattern, start_date, end_date)
        expenses = [-txn.amount for txn in matching if txn.amount < 0]
        total = sum(expenses, Decimal("0"))
        average = (total / len(expenses)).quantize(Decimal("0.01")) if expenses else Decimal("0")
        dates = [txn.date for txn in matching]
        return MerchantStats(
            merchant_pattern=merchant_pattern.strip(),
            total_expenses=total,
            transaction_count=len(matching),
            average_expense=average,
            first_date=min(dates, default=None),
            last_date=max(dates, default=None),
        )

    def merchant_period_trends(
        self,
        merchant_pattern: str,
        timeframe: Union[Timeframe, str] = Timeframe.MONTH,
        count: int = 6,
        end_ref: Optional[date] = None,
    ) -> list[PeriodTrend]:
        """Expenses matching a pattern for the last ``count`` periods, zero-filled."""
        periods = build_periods(timeframe, count, end_ref)
        matching = self._matching(merchant_pattern, periods[0][2], periods[-1][3])
        return bucket_by_period(periods, [txn for txn in matching if txn.amount < 0])
