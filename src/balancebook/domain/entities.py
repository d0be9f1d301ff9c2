"""Domain model entities for balancebook.

These are pure data classes representing business concepts, independent of
database schema. Stored records (accounts, balances, transactions, manual
entries, invoices) come first; result types produced by the aggregation
services follow.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")


class AccountType(str, Enum):
    """Kind of account; banks sort before wallets."""

    BANK = "bank"
    WALLET = "wallet"

    @property
    def sort_order(self) -> int:
        return 0 if self is AccountType.BANK else 1


class TransactionStatus(str, Enum):
    """Posting state of a ledger transaction."""

    ACTIVE = "active"
    DELETED = "deleted"


class CashflowType(str, Enum):
    """Direction of a manual cashflow entry."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class CashflowGroupBy(str, Enum):
    """Grouping modes for cashflow summaries."""

    NONE = "none"
    ACCOUNT = "account"
    COMPANY = "company"
    CURRENCY = "currency"


class InvoiceStatus(str, Enum):
    """Invoice lifecycle state."""

    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"


@dataclass(frozen=True)
class Company:
    """Company owning bank accounts and wallets."""

    id: int
    trading_name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Bank account or digital wallet domain entity.

    ``currencies`` holds the extra currency codes a wallet declares, already
    parsed into a set. Banks always have an empty set.
    """

    id: int
    account_type: AccountType
    company_id: int
    name: str
    currency: str
    created_at: datetime
    bank_name: Optional[str] = None
    currencies: frozenset[str] = frozenset()
    is_active: bool = True

    @property
    def key(self) -> tuple[AccountType, int]:
        return (self.account_type, self.id)

    @property
    def display_name(self) -> str:
        if self.account_type is AccountType.BANK and self.bank_name:
            return f"{self.bank_name} - {self.name}"
        return self.name


@dataclass(frozen=True)
class OpeningBalance:
    """Balance of an account/currency pair before any recorded transaction."""

    id: int
    account_id: int
    account_type: AccountType
    currency: str
    amount: Decimal
    notes: Optional[str]
    updated_at: datetime


@dataclass(frozen=True)
class LedgerTransaction:
    """Movement of funds in one currency on one date."""

    id: int
    account_id: int
    account_type: AccountType
    currency: str
    date: datetime
    incoming_amount: Decimal
    outgoing_amount: Decimal
    net_amount: Decimal
    description: Optional[str]
    linked_entry_id: Optional[int] = None
    status: TransactionStatus = TransactionStatus.ACTIVE
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.status is TransactionStatus.DELETED


@dataclass(frozen=True)
class ManualCashflowEntry:
    """User-entered inflow or outflow not backed by a ledger transaction."""

    id: int
    account_id: int
    account_type: AccountType
    currency: str
    period: str
    type: CashflowType
    amount: Decimal
    description: str
    notes: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Product:
    """Product with sale price and unit cost (cost is used only for COGS)."""

    id: int
    name: str
    price: Decimal
    currency: str
    cost: Decimal
    cost_currency: str
    is_active: bool = True


@dataclass(frozen=True)
class InvoiceItem:
    """Invoice line with its own frozen product snapshot."""

    id: int
    invoice_id: int
    product_id: Optional[int]
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    currency: str
    total: Decimal


@dataclass(frozen=True)
class InvoiceItemDraft:
    """Line item to be stored; name and price are copied from the product."""

    product_id: Optional[int]
    product_name: str
    quantity: Decimal
    unit_price: Decimal
    currency: str

    @property
    def total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class Invoice:
    """Invoice with its ordered line items."""

    id: int
    invoice_number: str
    company_id: int
    client_name: str
    currency: str
    status: InvoiceStatus
    total_amount: Decimal
    issue_date: date
    paid_date: Optional[date] = None
    items: tuple[InvoiceItem, ...] = ()


@dataclass(frozen=True)
class BookkeepingEntry:
    """Revenue or expense row; ``cogs`` is a snapshot taken at creation."""

    id: int
    company_id: int
    entry_type: str
    category: str
    amount: Decimal
    currency: str
    date: date
    cogs: Decimal
    cogs_paid: Decimal
    is_from_invoice: bool
    invoice_id: Optional[int]
    reference: Optional[str]
    description: Optional[str]
    created_at: datetime


# Aggregation results


@dataclass(frozen=True)
class LogicalSubAccount:
    """One (account, currency) pair produced by expanding an account."""

    account: Account
    currency: str
    has_opening_balance: bool
    is_declared: bool = True

    @property
    def key(self) -> str:
        return f"{self.account.account_type.value}:{self.account.id}:{self.currency}"

    @property
    def display_name(self) -> str:
        if self.account.account_type is AccountType.WALLET:
            return f"{self.account.display_name} ({self.currency})"
        return self.account.display_name

    def sort_key(self) -> tuple[int, str, str]:
        return (
            self.account.account_type.sort_order,
            self.account.display_name.lower(),
            self.currency,
        )


@dataclass(frozen=True)
class FlowTotals:
    """Inflow and outflow of one stream; net is derived."""

    inflow: Decimal = ZERO
    outflow: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.inflow - self.outflow

    def __add__(self, other: "FlowTotals") -> "FlowTotals":
        return FlowTotals(self.inflow + other.inflow, self.outflow + other.outflow)


@dataclass(frozen=True)
class CashflowFigures:
    """Automatic (transaction-derived) and manual streams, kept apart."""

    automatic: FlowTotals = FlowTotals()
    manual: FlowTotals = FlowTotals()

    @property
    def total(self) -> FlowTotals:
        return self.automatic + self.manual

    def __add__(self, other: "CashflowFigures") -> "CashflowFigures":
        return CashflowFigures(
            automatic=self.automatic + other.automatic,
            manual=self.manual + other.manual,
        )


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; either bound may be open."""

    start: Optional[date] = None
    end: Optional[date] = None


@dataclass(frozen=True)
class AccountCashflow:
    """Cashflow figures for one logical sub-account."""

    sub_account: LogicalSubAccount
    company_name: str
    figures: CashflowFigures

    @property
    def currency(self) -> str:
        return self.sub_account.currency


@dataclass(frozen=True)
class CashflowGroup:
    """Rows sharing a group key, with per-currency totals."""

    key: str
    name: str
    rows: tuple[AccountCashflow, ...]
    totals: dict[str, CashflowFigures] = field(default_factory=dict)


@dataclass(frozen=True)
class CashflowSummary:
    """Grouped cashflow rows plus per-currency totals over all rows."""

    group_by: CashflowGroupBy
    date_range: DateRange
    groups: tuple[CashflowGroup, ...]
    totals: dict[str, CashflowFigures] = field(default_factory=dict)

    @property
    def rows(self) -> tuple[AccountCashflow, ...]:
        return tuple(row for group in self.groups for row in group.rows)

    @property
    def account_count(self) -> int:
        return len({row.sub_account.account.key for row in self.rows})


@dataclass(frozen=True)
class AccountBalance:
    """Point-in-time balance breakdown for one logical sub-account.

    When ``available`` is False the amounts are None and ``error`` carries
    the reason.
    """

    sub_account: LogicalSubAccount
    as_of: Optional[datetime]
    opening_balance: Optional[Decimal]
    transaction_balance: Optional[Decimal]
    incoming_amount: Optional[Decimal]
    outgoing_amount: Optional[Decimal]
    final_balance: Optional[Decimal]
    last_transaction_date: Optional[datetime] = None
    available: bool = True
    error: Optional[str] = None

    @property
    def currency(self) -> str:
        return self.sub_account.currency


@dataclass(frozen=True)
class CurrencyBalanceTotals:
    """Assets, liabilities and net worth for a single currency."""

    assets: Decimal = ZERO
    liabilities: Decimal = ZERO

    @property
    def net_worth(self) -> Decimal:
        return self.assets - self.liabilities


@dataclass(frozen=True)
class BalanceSummary:
    """Account counts and per-currency totals of a balance report."""

    account_count: int
    bank_account_count: int
    wallet_count: int
    unavailable_count: int
    by_currency: dict[str, CurrencyBalanceTotals] = field(default_factory=dict)


@dataclass(frozen=True)
class COGSResult:
    """Cost of goods sold for one invoice."""

    amount: Decimal
    currency: Optional[str]
    mixed_currency_warning: bool = False
    missing_product_ids: tuple[int, ...] = ()
