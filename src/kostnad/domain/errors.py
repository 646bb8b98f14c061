"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    def __init__(self, message: str, entity: str, entity_id: object):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class UnauthenticatedError(DomainError):
    """Operation requires an acting user and none was given."""


class UnauthorizedError(DomainError):
    """Acting user is not allowed to perform the operation."""


class ConstraintError(DomainError):
    """Operation blocked by a data constraint, such as dependent rows."""

    def __init__(self, message: str, constraint: str):
        super().__init__(message)
        self.constraint = constraint


def category_not_found(category_id: object) -> NotFoundError:
    """Return error for missing category."""
    return NotFoundError(f"Category {category_id} not found", "category", category_id)


def transaction_not_found(transaction_id: int) -> NotFoundError:
    """Return error for missing transaction."""
    return NotFoundError(
        f"Transaction {transaction_id} not found", "transaction", transaction_id
    )


def merchant_mapping_not_found(pattern: str) -> NotFoundError:
    """Return error for missing merchant mapping."""
    return NotFoundError(
        f"Merchant mapping '{pattern}' not found", "merchant_mapping", pattern
    )


def upload_not_found(upload_id: int) -> NotFoundError:
    """Return error for missing upload."""
    return NotFoundError(f"Upload {upload_id} not found", "upload", upload_id)


def duplicate_transaction() -> ValidationError:
    """Return error for a manual transaction that already exists."""
    return ValidationError(
        "A transaction with these details already exists", field="duplicate"
    )


def category_delete_blocked(transaction_count: int) -> ConstraintError:
    """Return error when a category still has linked transactions."""
    return ConstraintError(
        f"Cannot delete category with {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. Reassign them first.",
        constraint="has_transactions",
    )
