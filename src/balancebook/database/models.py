"""SQLAlchemy models for balancebook database."""

from datetime import datetime, UTC
from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.types import TypeDecorator
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Money(TypeDecorator):
    """Decimal stored as text.

    SQLite keeps NUMERIC values as binary floats, which loses digits past
    about 15 significant figures.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(value)


MONEY = Money()


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    trading_name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="company")


class Account(Base):
    """Bank account or digital wallet model.

    ``currencies`` keeps the legacy comma-delimited list of extra wallet
    currencies; it is parsed once by the mapper.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    account_type = Column(String, nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    name = Column(String, nullable=False)
    bank_name = Column(String, nullable=True)
    currency = Column(String, nullable=False)
    currencies = Column(String, default="", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    company = relationship("Company", back_populates="accounts")


class OpeningBalance(Base):
    """Opening balance model, unique per account and currency."""

    __tablename__ = "opening_balances"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    account_type = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    notes = Column(String, nullable=True)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "account_type", "currency", name="uq_opening_balance"),
    )


class LedgerTransaction(Base):
    """Ledger transaction model; rows are soft-deleted through ``status``."""

    __tablename__ = "ledger_transactions"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    account_type = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    date = Column(DateTime, nullable=False)
    incoming_amount = Column(MONEY, default=0, nullable=False)
    outgoing_amount = Column(MONEY, default=0, nullable=False)
    net_amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=True)
    linked_entry_id = Column(Integer, ForeignKey("bookkeeping_entries.id"), nullable=True)
    status = Column(String, default="active", nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        Index("ix_ledger_account_currency_date", "account_id", "account_type", "currency", "date"),
    )


class ManualCashflowEntry(Base):
    """Manual cashflow entry model."""

    __tablename__ = "manual_cashflow_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    account_type = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    period = Column(String(7), nullable=False)
    type = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    description = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Product(Base):
    """Product model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(MONEY, nullable=False)
    currency = Column(String, nullable=False)
    cost = Column(MONEY, default=0, nullable=False)
    cost_currency = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Invoice(Base):
    """Invoice model."""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True)
    invoice_number = Column(String, unique=True, nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    client_name = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    status = Column(String, default="draft", nullable=False)
    total_amount = Column(MONEY, nullable=False)
    issue_date = Column(Date, nullable=False)
    paid_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )


class InvoiceItem(Base):
    """Invoice item model.

    ``product_id`` is a weak reference without a foreign key: deleting the
    product leaves the item and its snapshot fields untouched.
    """

    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=False)
    position = Column(Integer, nullable=False)
    product_id = Column(Integer, nullable=True)
    product_name = Column(String, nullable=False)
    quantity = Column(MONEY, nullable=False)
    unit_price = Column(MONEY, nullable=False)
    currency = Column(String, nullable=False)
    total = Column(MONEY, nullable=False)

    # Relationships
    invoice = relationship("Invoice", back_populates="items")


class BookkeepingEntry(Base):
    """Bookkeeping entry model."""

    __tablename__ = "bookkeeping_entries"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    entry_type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    amount = Column(MONEY, nullable=False)
    currency = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    cogs = Column(MONEY, default=0, nullable=False)
    cogs_paid = Column(MONEY, default=0, nullable=False)
    is_from_invoice = Column(Boolean, default=False, nullable=False)
    invoice_id = Column(Integer, ForeignKey("invoices.id"), nullable=True, unique=True)
    reference = Column(String, nullable=True)
    description = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
