"""Abstract database interface (the ledger store)."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from balancebook.domain.entities import (
    Account,
    AccountType,
    BookkeepingEntry,
    CashflowType,
    Company,
    Invoice,
    InvoiceItemDraft,
    InvoiceStatus,
    LedgerTransaction,
    ManualCashflowEntry,
    OpeningBalance,
    Product,
)


class Database(ABC):
    """Abstract database interface for balancebook.

    Write discipline: transactions are append-only and only soft-deleted,
    opening balances are only upserted.
    """

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

    # Company operations
    @abstractmethod
    def create_company(self, trading_name: str) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def get_company_by_name(self, trading_name: str) -> Optional[Company]:
        """Get company by trading name."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies ordered by trading name."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        account_type: AccountType,
        company_id: int,
        name: str,
        currency: str,
        bank_name: Optional[str] = None,
        currencies: Iterable[str] = (),
    ) -> int:
        """Create a bank account or wallet. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int, account_type: AccountType) -> Optional[Account]:
        """Get account by its (id, type) identity."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        company_id: Optional[int] = None,
        account_type: Optional[AccountType] = None,
        active_only: bool = False,
    ) -> list[Account]:
        """List accounts with optional filters."""
        pass

    @abstractmethod
    def update_account_active(
        self, account_id: int, account_type: AccountType, is_active: bool
    ) -> None:
        """Set the active flag of an account."""
        pass

    # Opening balance operations
    @abstractmethod
    def upsert_opening_balance(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        amount: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Create or replace the opening balance of an account/currency pair."""
        pass

    @abstractmethod
    def find_opening_balance(
        self, account_id: int, account_type: AccountType, currency: str
    ) -> Optional[OpeningBalance]:
        """Find the opening balance of an account/currency pair."""
        pass

    @abstractmethod
    def list_opening_balances(
        self, account_id: int, account_type: AccountType
    ) -> list[OpeningBalance]:
        """List all opening balances of an account."""
        pass

    # Ledger transaction operations
    @abstractmethod
    def create_transaction(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        date: datetime,
        incoming_amount: Decimal,
        outgoing_amount: Decimal,
        description: Optional[str] = None,
        linked_entry_id: Optional[int] = None,
    ) -> int:
        """Post a transaction; net amount is incoming minus outgoing."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[LedgerTransaction]:
        """Get transaction by ID, including soft-deleted ones."""
        pass

    @abstractmethod
    def soft_delete_transaction(self, transaction_id: int) -> None:
        """Mark a transaction as deleted."""
        pass

    @abstractmethod
    def find_transactions(
        self,
        account_id: int,
        account_type: AccountType,
        currency: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[LedgerTransaction]:
        """Find active transactions of an account.

        Args:
            account_id: Account ID
            account_type: Account type
            currency: Optional currency filter
            date_from: Optional inclusive lower timestamp bound
            date_to: Optional inclusive upper timestamp bound

        Soft-deleted transactions are never returned.
        """
        pass

    @abstractmethod
    def find_recorded_currencies(self, account_id: int, account_type: AccountType) -> list[str]:
        """Find currencies with an opening balance or active transaction on an account."""
        pass

    # Manual cashflow operations
    @abstractmethod
    def create_manual_entry(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        period: str,
        type: CashflowType,
        amount: Decimal,
        description: str,
        notes: Optional[str] = None,
    ) -> int:
        """Create a manual cashflow entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_manual_entry(self, entry_id: int) -> Optional[ManualCashflowEntry]:
        """Get manual cashflow entry by ID."""
        pass

    @abstractmethod
    def delete_manual_entry(self, entry_id: int) -> None:
        """Delete a manual cashflow entry."""
        pass

    @abstractmethod
    def find_manual_entries(
        self,
        account_id: int,
        account_type: AccountType,
        currency: Optional[str] = None,
        period_from: Optional[str] = None,
        period_to: Optional[str] = None,
    ) -> list[ManualCashflowEntry]:
        """Find manual entries of an account, optionally within YYYY-MM periods."""
        pass

    # Product operations
    @abstractmethod
    def create_product(
        self, name: str, price: Decimal, currency: str, cost: Decimal, cost_currency: str
    ) -> int:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID."""
        pass

    @abstractmethod
    def update_product_cost(
        self, product_id: int, cost: Decimal, cost_currency: Optional[str] = None
    ) -> None:
        """Update a product's unit cost."""
        pass

    @abstractmethod
    def delete_product(self, product_id: int) -> None:
        """Delete a product; invoice items keep their snapshot."""
        pass

    @abstractmethod
    def find_products_by_ids(self, ids: Iterable[int]) -> list[Product]:
        """Find the products matching the given IDs; unknown IDs are skipped."""
        pass

    # Invoice operations
    @abstractmethod
    def create_invoice(
        self,
        invoice_number: str,
        company_id: int,
        client_name: str,
        currency: str,
        issue_date: date,
        items: list[InvoiceItemDraft],
        status: InvoiceStatus = InvoiceStatus.SENT,
    ) -> int:
        """Create an invoice with its items. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice with items by ID."""
        pass

    @abstractmethod
    def update_invoice_status(
        self, invoice_id: int, status: InvoiceStatus, paid_date: Optional[date] = None
    ) -> None:
        """Update invoice status and paid date."""
        pass

    # Bookkeeping entry operations
    @abstractmethod
    def create_bookkeeping_entry(
        self,
        company_id: int,
        entry_type: str,
        category: str,
        amount: Decimal,
        currency: str,
        date: date,
        cogs: Decimal = Decimal("0"),
        cogs_paid: Decimal = Decimal("0"),
        is_from_invoice: bool = False,
        invoice_id: Optional[int] = None,
        reference: Optional[str] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a bookkeeping entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_bookkeeping_entry(self, entry_id: int) -> Optional[BookkeepingEntry]:
        """Get bookkeeping entry by ID."""
        pass

    @abstractmethod
    def find_bookkeeping_entry_for_invoice(self, invoice_id: int) -> Optional[BookkeepingEntry]:
        """Find the bookkeeping entry generated from an invoice."""
        pass
