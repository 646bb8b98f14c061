"""Merchant-pattern auto-categorization."""

from typing import Iterable, Optional

from kostnad.domain.entities import MerchantMapping


def pattern_matches(pattern: str, merchant: str) -> bool:
    """Case-insensitive substring match of a merchant pattern."""
    return pattern.casefold() in merchant.casefold()


class MerchantCategorizer:
    """Assigns categories from an ordered list of merchant mappings.

    The first mapping whose pattern matches decides. A multi-merchant mapping
    (an umbrella merchant selling many kinds of things) leaves the
    transaction uncategorized so that it lands in manual review.
    """

    def __init__(self, mappings: Iterable[MerchantMapping]):
        """Initialize categorizer.

        Args:
            mappings: Merchant mappings in mapping order
        """
        self.mappings = list(mappings)

    def find_mapping(self, merchant: str) -> Optional[MerchantMapping]:
        """Return the first mapping that matches the merchant."""
        for mapping in self.mappings:
            if pattern_matches(mapping.merchant_pattern, merchant):
                return mapping
        return None

    def find_category(self, merchant: str) -> Optional[int]:
        """Return the category ID to auto-assign, or None for manual review."""
        mapping = self.find_mapping(merchant)
        if mapping is None or mapping.is_multi_merchant:
            return None
        return mapping.category_id

    def is_multi_merchant(self, merchant: str) -> bool:
        """True if any multi-merchant pattern matches the merchant."""
        return any(
            mapping.is_multi_merchant and pattern_matches(mapping.merchant_pattern, merchant)
            for mapping in self.mappings
        )
