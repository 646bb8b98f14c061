"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay stable
when the database schema changes.
"""

from decimal import Decimal

from kostnad.domain import entities as domain
from kostnad.database.models import (
    Category as ORMCategory,
    Transaction as ORMTransaction,
    MerchantMapping as ORMMerchantMapping,
    Upload as ORMUpload,
)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        description=orm_category.description,
        icon=orm_category.icon,
        is_default=bool(orm_category.is_default),
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    balance = orm_transaction.balance
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        merchant=orm_transaction.merchant,
        amount=Decimal(orm_transaction.amount),
        balance=Decimal(balance) if balance is not None else None,
        category_id=orm_transaction.category_id,
        original_hash=orm_transaction.original_hash,
        upload_id=orm_transaction.upload_id,
        created_at=orm_transaction.created_at,
    )


def merchant_mapping_to_domain(orm_mapping: ORMMerchantMapping) -> domain.MerchantMapping:
    """Convert SQLAlchemy MerchantMapping model to domain MerchantMapping entity."""
    return domain.MerchantMapping(
        id=orm_mapping.id,
        merchant_pattern=orm_mapping.merchant_pattern,
        category_id=orm_mapping.category_id,
        is_multi_merchant=bool(orm_mapping.is_multi_merchant),
        created_at=orm_mapping.created_at,
    )


def upload_to_domain(orm_upload: ORMUpload) -> domain.Upload:
    """Convert SQLAlchemy Upload model to domain Upload entity."""
    return domain.Upload(
        id=orm_upload.id,
        file_name=orm_upload.file_name,
        uploaded_by=orm_upload.uploaded_by,
        transaction_count=orm_upload.transaction_count,
        date_range_start=orm_upload.date_range_start,
        date_range_end=orm_upload.date_range_end,
        created_at=orm_upload.created_at,
    )
