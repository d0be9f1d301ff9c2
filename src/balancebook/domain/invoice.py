"""Product, invoice and invoice payment domain service."""

import logging
from typing import Iterable, Optional
from datetime import date
from decimal import Decimal

from balancebook.cache import Cache, CacheInvalidator, NullCache
from balancebook.cache.keys import cogs_key
from balancebook.database.base import Database
from balancebook.domain.cogs import calculate_invoice_cogs
from balancebook.domain.entities import (
    BookkeepingEntry,
    COGSResult,
    Invoice,
    InvoiceItemDraft,
    InvoiceStatus,
    Product,
    ZERO,
)
from balancebook.domain.errors import (
    NotFoundError,
    ValidationError,
    company_not_found,
    invoice_not_found,
    product_not_found,
)
from balancebook.utils.amount_parser import parse_currency_code, to_decimal

logger = logging.getLogger(__name__)

SALES_REVENUE_CATEGORY = "Sales Revenue"
INCOME_ENTRY = "income"


class InvoiceService:
    """Service for products, invoices and their COGS."""

    def __init__(self, db: Database, cache: Optional[Cache] = None):
        """Initialize invoice service.

        Args:
            db: Database instance
            cache: Cache for COGS results (optional)
        """
        self.db = db
        self.cache = cache if cache is not None else NullCache()
        self.invalidator = CacheInvalidator(self.cache)

    # Products
    def create_product(
        self,
        name: str,
        price: Decimal | int | str,
        currency: str,
        cost: Decimal | int | str = ZERO,
        cost_currency: Optional[str] = None,
    ) -> int:
        """Create a product.

        Args:
            name: Product name
            price: Sale price
            currency: Sale price currency
            cost: Unit cost used for COGS (>= 0)
            cost_currency: Cost currency, defaults to ``currency``

        Returns:
            Product ID
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Product name is required")
        currency = parse_currency_code(currency)
        cost_currency = parse_currency_code(cost_currency) if cost_currency else currency
        price = to_decimal(price, "price")
        cost = to_decimal(cost, "cost")
        if price < 0:
            raise ValidationError("Product price must not be negative")
        if cost < 0:
            raise ValidationError("Product cost must not be negative")

        product_id = self.db.create_product(name, price, currency, cost, cost_currency)
        self.invalidator.invalidate_product(product_id)
        return product_id

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID."""
        return self.db.get_product(product_id)

    def update_product_cost(
        self,
        product_id: int,
        cost: Decimal | int | str,
        cost_currency: Optional[str] = None,
    ) -> None:
        """Change a product's unit cost.

        Frozen COGS on already paid invoices is not touched; use
        ``cogs_drift`` to see the difference.
        """
        cost = to_decimal(cost, "cost")
        if cost < 0:
            raise ValidationError("Product cost must not be negative")
        if self.db.get_product(product_id) is None:
            raise NotFoundError(product_not_found(product_id))

        self.db.update_product_cost(
            product_id, cost, parse_currency_code(cost_currency) if cost_currency else None
        )
        self.invalidator.invalidate_product(product_id)

    def delete_product(self, product_id: int) -> None:
        """Delete a product. Invoice items keep their name and price snapshot."""
        if self.db.get_product(product_id) is None:
            raise NotFoundError(product_not_found(product_id))
        self.db.delete_product(product_id)
        self.invalidator.invalidate_product(product_id)

    # Invoices
    def create_invoice(
        self,
        invoice_number: str,
        company_id: int,
        client_name: str,
        issue_date: date,
        items: Iterable[tuple[int, Decimal | int | str]],
        currency: Optional[str] = None,
    ) -> int:
        """Create an invoice from (product_id, quantity) pairs.

        Each item copies the product's name, price and currency at creation
        time.

        Args:
            invoice_number: Unique invoice number
            company_id: Issuing company ID
            client_name: Client name
            issue_date: Issue date
            items: (product_id, quantity) pairs, in line order
            currency: Invoice currency, defaults to the first item's currency

        Returns:
            Invoice ID

        Raises:
            ValidationError: If there are no items or a quantity is not positive
            NotFoundError: If the company or a product does not exist
        """
        invoice_number = (invoice_number or "").strip()
        if not invoice_number:
            raise ValidationError("Invoice number is required")
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))

        drafts = []
        for product_id, quantity in items:
            quantity = to_decimal(quantity, "quantity")
            if quantity <= 0:
                raise ValidationError(f"Quantity for product {product_id} must be positive")
            product = self.db.get_product(product_id)
            if product is None:
                raise NotFoundError(product_not_found(product_id))
            drafts.append(
                InvoiceItemDraft(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                    currency=product.currency,
                )
            )
        if not drafts:
            raise ValidationError("Invoice needs at least one item")

        invoice_id = self.db.create_invoice(
            invoice_number=invoice_number,
            company_id=company_id,
            client_name=client_name,
            currency=parse_currency_code(currency) if currency else drafts[0].currency,
            issue_date=issue_date,
            items=drafts,
        )
        self.invalidator.invalidate_invoice(invoice_id)
        self.invalidator.invalidate_company(company_id)
        return invoice_id

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        """Get invoice with items by ID."""
        return self.db.get_invoice(invoice_id)

    def _require_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.db.get_invoice(invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        return invoice

    def _compute_cogs(self, invoice: Invoice) -> COGSResult:
        products = self.db.find_products_by_ids(item.product_id for item in invoice.items)
        result = calculate_invoice_cogs(invoice, products)
        if result.missing_product_ids:
            logger.warning(
                "Invoice %s references missing products %s; their cost counts as zero",
                invoice.invoice_number,
                list(result.missing_product_ids),
            )
        if result.mixed_currency_warning:
            logger.warning(
                "Invoice %s mixes product cost currencies; COGS summed without conversion",
                invoice.invoice_number,
            )
        return result

    # COGS
    def calculate_cogs(self, invoice_id: int) -> COGSResult:
        """Calculate the current COGS of an invoice from live product costs.

        Raises:
            NotFoundError: If the invoice does not exist
        """
        invoice = self._require_invoice(invoice_id)
        key = cogs_key(invoice.id, (item.product_id for item in invoice.items))
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        result = self._compute_cogs(invoice)
        self.cache.set(key, result)
        return result

    def record_payment(self, invoice_id: int, paid_date: Optional[date] = None) -> BookkeepingEntry:
        """Mark an invoice paid and book its revenue with a frozen COGS.

        Calling it again returns the existing entry; COGS is never
        recomputed once frozen.

        Args:
            invoice_id: Invoice ID
            paid_date: Payment date, defaults to today

        Returns:
            The invoice's bookkeeping entry

        Raises:
            NotFoundError: If the invoice does not exist
        """
        invoice = self._require_invoice(invoice_id)
        existing = self.db.find_bookkeeping_entry_for_invoice(invoice.id)
        if existing is not None:
            logger.info(
                "Invoice %s already has bookkeeping entry %d", invoice.invoice_number, existing.id
            )
            return existing

        paid_date = paid_date or date.today()
        result = self._compute_cogs(invoice)
        entry_id = self.db.create_bookkeeping_entry(
            company_id=invoice.company_id,
            entry_type=INCOME_ENTRY,
            category=SALES_REVENUE_CATEGORY,
            amount=invoice.total_amount,
            currency=invoice.currency,
            date=paid_date,
            cogs=result.amount,
            cogs_paid=ZERO,
            is_from_invoice=True,
            invoice_id=invoice.id,
            reference=invoice.invoice_number,
            description=f"Payment for invoice {invoice.invoice_number} - {invoice.client_name}",
        )
        self.db.update_invoice_status(invoice.id, InvoiceStatus.PAID, paid_date=paid_date)
        self.invalidator.invalidate_invoice(invoice.id)
        self.invalidator.invalidate_company(invoice.company_id)
        logger.info(
            "Created bookkeeping entry %d for invoice %s with COGS %s",
            entry_id,
            invoice.invoice_number,
            result.amount,
        )
        return self.db.get_bookkeeping_entry(entry_id)

    def cogs_drift(self, invoice_id: int) -> Decimal:
        """Return fresh COGS minus the COGS frozen at payment.

        Nothing is modified.

        Raises:
            NotFoundError: If the invoice does not exist or is not paid yet
        """
        invoice = self._require_invoice(invoice_id)
        entry = self.db.find_bookkeeping_entry_for_invoice(invoice.id)
        if entry is None:
            raise NotFoundError(f"Invoice {invoice_id} has no bookkeeping entry yet")
        return self._compute_cogs(invoice).amount - entry.cogs
