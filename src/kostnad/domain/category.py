"""Category domain service."""

import logging
from collections import Counter
from typing import Optional

from kostnad.database.base import Database
from kostnad.domain.defaults import DEFAULT_CATEGORIES, DEFAULT_MERCHANT_PATTERNS
from kostnad.domain.entities import Category, CategoryDetails
from kostnad.domain.errors import (
    ConstraintError,
    ValidationError,
    category_delete_blocked,
    category_not_found,
)

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 200
MAX_ICON_LENGTH = 10


def _validate_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name or len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            f"Category name is required (1-{MAX_NAME_LENGTH} chars)", field="name"
        )
    return name


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        description: Optional[str] = None,
        icon: Optional[str] = None,
        is_default: bool = False,
    ) -> int:
        """Create a category.

        Args:
            name: Category name, unique, 1-100 characters
            description: Optional description, up to 200 characters
            icon: Optional icon (emoji), up to 10 characters
            is_default: Default categories cannot be deleted

        Returns:
            Category ID

        Raises:
            ValidationError: If a field is missing or too long
            ConstraintError: If a category with the same name exists
        """
        name = _validate_name(name)
        if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
                field="description",
            )
        if icon is not None and len(icon) > MAX_ICON_LENGTH:
            raise ValidationError(
                f"Icon must be at most {MAX_ICON_LENGTH} characters", field="icon"
            )
        if self.db.get_category_by_name(name) is not None:
            raise ConstraintError(
                f"Category '{name}' already exists", constraint="unique_name"
            )

        return self.db.create_category(
            name=name, description=description, icon=icon, is_default=is_default
        )

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        return self.db.get_category_by_name(name)

    def require_category(self, category_id: int) -> Category:
        """Get category by ID or raise NotFoundError."""
        category = self.db.get_category(category_id)
        if category is None:
            raise category_not_found(category_id)
        return category

    def resolve_category(self, name_or_id: str) -> Category:
        """Resolve a category from a CLI argument (ID or exact name)."""
        value = name_or_id.strip()
        if value.isdigit():
            category = self.db.get_category(int(value))
            if category is not None:
                return category
        category = self.db.get_category_by_name(value)
        if category is None:
            raise category_not_found(value)
        return category

    def list_categories(self) -> list[Category]:
        """List categories ordered by name."""
        return self.db.list_categories()

    def list_categories_with_details(self) -> list[CategoryDetails]:
        """List categories with transaction counts and their merchant patterns.

        Multi-merchant patterns are left out; patterns are sorted
        alphabetically.
        """
        counts = Counter(txn.category_id for txn in self.db.list_transactions())
        patterns: dict[int, list[str]] = {}
        for mapping in self.db.list_merchant_mappings():
            if mapping.is_multi_merchant or mapping.category_id is None:
                continue
            patterns.setdefault(mapping.category_id, []).append(mapping.merchant_pattern)

        return [
            CategoryDetails(
                category=category,
                transaction_count=counts[category.id],
                merchant_patterns=tuple(sorted(patterns.get(category.id, []))),
            )
            for category in self.db.list_categories()
        ]

    def update_category(self, category_id: int, name: str) -> Category:
        """Rename a category.

        Raises:
            ValidationError: If the name is invalid
            NotFoundError: If the category doesn't exist
            ConstraintError: If another category already has the name
        """
        name = _validate_name(name)
        self.require_category(category_id)

        existing = self.db.get_category_by_name(name)
        if existing is not None and existing.id != category_id:
            raise ConstraintError(
                f"Category '{name}' already exists", constraint="unique_name"
            )

        self.db.update_category(category_id, name=name)
        return self.require_category(category_id)

    def delete_category(self, category_id: int) -> Category:
        """Delete a category and the merchant mappings that point at it.

        Raises:
            NotFoundError: If the category doesn't exist
            ConstraintError: If the category is a default one or still has transactions
        """
        category = self.require_category(category_id)
        if category.is_default:
            raise ConstraintError(
                "Cannot delete default categories", constraint="is_default"
            )

        transaction_count = self.db.get_category_transaction_count(category_id)
        if transaction_count > 0:
            raise category_delete_blocked(transaction_count)

        self.db.delete_category(category_id)
        logger.info("Deleted category %d (%s)", category.id, category.name)
        return category

    def seed_defaults(self) -> tuple[int, int]:
        """Create the default categories and merchant mappings.

        Existing categories keep their ID and get the default description and
        icon. Existing patterns are re-pointed at their default category,
        except patterns marked multi-merchant, which are left alone.

        Returns:
            Tuple of (categories created, mappings created or updated)
        """
        created_categories = 0
        for name, description, icon in DEFAULT_CATEGORIES:
            existing = self.db.get_category_by_name(name)
            if existing is None:
                self.db.create_category(
                    name=name, description=description, icon=icon, is_default=True
                )
                created_categories += 1
            else:
                self.db.update_category(existing.id, description=description, icon=icon)

        seeded_mappings = 0
        for category_name, patterns in DEFAULT_MERCHANT_PATTERNS.items():
            category = self.db.get_category_by_name(category_name)
            if category is None:
                logger.warning("Category '%s' not found, skipping mappings", category_name)
                continue
            for pattern in patterns:
                mapping = self.db.get_merchant_mapping(pattern)
                if mapping is not None and mapping.is_multi_merchant:
                    continue
                self.db.upsert_merchant_mapping(pattern, category.id, is_multi_merchant=False)
                seeded_mappings += 1

        logger.info(
            "Seeded %d categories and %d merchant mappings", created_categories, seeded_mappings
        )
        return created_categories, seeded_mappings
