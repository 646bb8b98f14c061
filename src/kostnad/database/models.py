"""SQLAlchemy models for kostnad database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String(200), nullable=True)
    icon = Column(String(10), nullable=True)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")
    merchant_mappings = relationship("MerchantMapping", back_populates="category")


class Upload(Base):
    """Statement upload model."""

    __tablename__ = "uploads"

    id = Column(Integer, primary_key=True)
    file_name = Column(String, nullable=False)
    uploaded_by = Column(String, nullable=False)
    transaction_count = Column(Integer, default=0, nullable=False)
    date_range_start = Column(Date, nullable=True)
    date_range_end = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    transactions = relationship(
        "Transaction", back_populates="upload", cascade="all, delete-orphan"
    )


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    merchant = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    balance = Column(Numeric(12, 2), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    # Nullable for manually created transactions
    upload_id = Column(Integer, ForeignKey("uploads.id", ondelete="CASCADE"), nullable=True)
    # Hash of the values at creation time, kept when date/merchant/amount are edited
    original_hash = Column(String(64), nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_original_hash", "original_hash"),
    )

    # Relationships
    category = relationship("Category", back_populates="transactions")
    upload = relationship("Upload", back_populates="transactions")


class MerchantMapping(Base):
    """Merchant pattern to category mapping model."""

    __tablename__ = "merchant_mappings"

    id = Column(Integer, primary_key=True)
    merchant_pattern = Column(String, unique=True, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    # Multi-merchants always require manual review
    is_multi_merchant = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    category = relationship("Category", back_populates="merchant_mappings")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
