"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic. It is also the single place where
the stored comma-delimited wallet currency list becomes a set of codes.
"""

from decimal import Decimal

from balancebook.domain import entities as domain
from balancebook.domain.multi_currency import parse_currency_list
from balancebook.database.models import (
    Company as ORMCompany,
    Account as ORMAccount,
    OpeningBalance as ORMOpeningBalance,
    LedgerTransaction as ORMLedgerTransaction,
    ManualCashflowEntry as ORMManualCashflowEntry,
    Product as ORMProduct,
    Invoice as ORMInvoice,
    InvoiceItem as ORMInvoiceItem,
    BookkeepingEntry as ORMBookkeepingEntry,
)


def _money(value) -> Decimal:
    """Normalize a stored money value to Decimal (None becomes zero)."""
    if value is None:
        return domain.ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        trading_name=orm_company.trading_name,
        created_at=orm_company.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    account_type = domain.AccountType(orm_account.account_type)
    currencies: frozenset[str] = frozenset()
    if account_type is domain.AccountType.WALLET:
        currencies = frozenset(parse_currency_list(orm_account.currencies))
    return domain.Account(
        id=orm_account.id,
        account_type=account_type,
        company_id=orm_account.company_id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        currency=orm_account.currency,
        currencies=currencies,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def opening_balance_to_domain(orm_balance: ORMOpeningBalance) -> domain.OpeningBalance:
    """Convert SQLAlchemy OpeningBalance model to domain OpeningBalance entity."""
    return domain.OpeningBalance(
        id=orm_balance.id,
        account_id=orm_balance.account_id,
        account_type=domain.AccountType(orm_balance.account_type),
        currency=orm_balance.currency,
        amount=_money(orm_balance.amount),
        notes=orm_balance.notes,
        updated_at=orm_balance.updated_at,
    )


def transaction_to_domain(orm_transaction: ORMLedgerTransaction) -> domain.LedgerTransaction:
    """Convert SQLAlchemy LedgerTransaction model to domain LedgerTransaction entity."""
    return domain.LedgerTransaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        account_type=domain.AccountType(orm_transaction.account_type),
        currency=orm_transaction.currency,
        date=orm_transaction.date,
        incoming_amount=_money(orm_transaction.incoming_amount),
        outgoing_amount=_money(orm_transaction.outgoing_amount),
        net_amount=_money(orm_transaction.net_amount),
        description=orm_transaction.description,
        linked_entry_id=orm_transaction.linked_entry_id,
        status=domain.TransactionStatus(orm_transaction.status),
        deleted_at=orm_transaction.deleted_at,
    )


def manual_entry_to_domain(orm_entry: ORMManualCashflowEntry) -> domain.ManualCashflowEntry:
    """Convert SQLAlchemy ManualCashflowEntry model to domain entity."""
    return domain.ManualCashflowEntry(
        id=orm_entry.id,
        account_id=orm_entry.account_id,
        account_type=domain.AccountType(orm_entry.account_type),
        currency=orm_entry.currency,
        period=orm_entry.period,
        type=domain.CashflowType(orm_entry.type),
        amount=_money(orm_entry.amount),
        description=orm_entry.description,
        notes=orm_entry.notes,
        created_at=orm_entry.created_at,
    )


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    return domain.Product(
        id=orm_product.id,
        name=orm_product.name,
        price=_money(orm_product.price),
        currency=orm_product.currency,
        cost=_money(orm_product.cost),
        cost_currency=orm_product.cost_currency,
        is_active=orm_product.is_active,
    )


def invoice_item_to_domain(orm_item: ORMInvoiceItem) -> domain.InvoiceItem:
    """Convert SQLAlchemy InvoiceItem model to domain InvoiceItem entity."""
    return domain.InvoiceItem(
        id=orm_item.id,
        invoice_id=orm_item.invoice_id,
        product_id=orm_item.product_id,
        product_name=orm_item.product_name,
        quantity=_money(orm_item.quantity),
        unit_price=_money(orm_item.unit_price),
        currency=orm_item.currency,
        total=_money(orm_item.total),
    )


def invoice_to_domain(orm_invoice: ORMInvoice) -> domain.Invoice:
    """Convert SQLAlchemy Invoice model (with items) to domain Invoice entity."""
    return domain.Invoice(
        id=orm_invoice.id,
        invoice_number=orm_invoice.invoice_number,
        company_id=orm_invoice.company_id,
        client_name=orm_invoice.client_name,
        currency=orm_invoice.currency,
        status=domain.InvoiceStatus(orm_invoice.status),
        total_amount=_money(orm_invoice.total_amount),
        issue_date=orm_invoice.issue_date,
        paid_date=orm_invoice.paid_date,
        items=tuple(invoice_item_to_domain(item) for item in orm_invoice.items),
    )


def bookkeeping_entry_to_domain(orm_entry: ORMBookkeepingEntry) -> domain.BookkeepingEntry:
    """Convert SQLAlchemy BookkeepingEntry model to domain BookkeepingEntry entity."""
    return domain.BookkeepingEntry(
        id=orm_entry.id,
        company_id=orm_entry.company_id,
        entry_type=orm_entry.entry_type,
        category=orm_entry.category,
        amount=_money(orm_entry.amount),
        currency=orm_entry.currency,
        date=orm_entry.date,
        cogs=_money(orm_entry.cogs),
        cogs_paid=_money(orm_entry.cogs_paid),
        is_from_invoice=orm_entry.is_from_invoice,
        invoice_id=orm_entry.invoice_id,
        reference=orm_entry.reference,
        description=orm_entry.description,
        created_at=orm_entry.created_at,
    )
