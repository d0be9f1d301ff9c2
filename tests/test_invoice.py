"""Tests for the invoice service and frozen COGS."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from balancebook.domain.entities import InvoiceStatus
from balancebook.domain.errors import NotFoundError, ValidationError
from balancebook.domain.invoice import SALES_REVENUE_CATEGORY


@pytest.fixture
def products(invoice_service):
    """Products costing 200, 120 and 75 USD."""
    return [
        invoice_service.create_product("Router", "350", "USD", cost="200"),
        invoice_service.create_product("Switch", "180", "USD", cost="120"),
        invoice_service.create_product("Cable kit", "90", "usd", cost="75"),
    ]


@pytest.fixture
def invoice_id(invoice_service, sample_company, products):
    router, switch, cables = products
    return invoice_service.create_invoice(
        "INV-001",
        sample_company.id,
        "Globex",
        date(2024, 1, 10),
        [(router, 1), (switch, "3"), (cables, 2)],
    )


class TestProducts:
    """Tests for product management."""

    def test_cost_currency_defaults_to_price_currency(self, invoice_service, products):
        product = invoice_service.get_product(products[2])

        assert product.currency == "USD"
        assert product.cost_currency == "USD"
        assert product.cost == Decimal("75")

    def test_rejects_negative_cost(self, invoice_service):
        with pytest.raises(ValidationError, match="cost must not be negative"):
            invoice_service.create_product("Bad", "10", "USD", cost="-1")

    def test_rejects_blank_name(self, invoice_service):
        with pytest.raises(ValidationError):
            invoice_service.create_product("  ", "10", "USD")

    def test_update_cost_of_unknown_product(self, invoice_service):
        with pytest.raises(NotFoundError, match="Product 42 not found"):
            invoice_service.update_product_cost(42, "1")


class TestInvoices:
    """Tests for invoice creation."""

    def test_items_snapshot_product_details(self, invoice_service, invoice_id):
        invoice = invoice_service.get_invoice(invoice_id)

        assert invoice.status is InvoiceStatus.SENT
        assert invoice.currency == "USD"
        assert [item.product_name for item in invoice.items] == ["Router", "Switch", "Cable kit"]
        assert invoice.items[1].quantity == Decimal("3")
        assert invoice.total_amount == Decimal("1070")

    def test_requires_items(self, invoice_service, sample_company):
        with pytest.raises(ValidationError, match="at least one item"):
            invoice_service.create_invoice("INV-2", sample_company.id, "Globex", date(2024, 1, 1), [])

    def test_rejects_non_positive_quantity(self, invoice_service, sample_company, products):
        with pytest.raises(ValidationError, match="must be positive"):
            invoice_service.create_invoice(
                "INV-2", sample_company.id, "Globex", date(2024, 1, 1), [(products[0], 0)]
            )

    def test_unknown_product_or_company(self, invoice_service, sample_company, products):
        with pytest.raises(NotFoundError, match="Product 999"):
            invoice_service.create_invoice(
                "INV-2", sample_company.id, "Globex", date(2024, 1, 1), [(999, 1)]
            )
        with pytest.raises(NotFoundError, match="Company 77"):
            invoice_service.create_invoice("INV-2", 77, "Globex", date(2024, 1, 1), [(products[0], 1)])


class TestCogs:
    """Tests for live and frozen COGS."""

    def test_calculate_cogs(self, invoice_service, invoice_id):
        result = invoice_service.calculate_cogs(invoice_id)

        assert result.amount == Decimal("710.00")
        assert result.currency == "USD"

    def test_calculate_cogs_unknown_invoice(self, invoice_service):
        with pytest.raises(NotFoundError, match="Invoice 5 not found"):
            invoice_service.calculate_cogs(5)

    def test_cost_change_invalidates_cached_cogs(self, invoice_service, invoice_id, products):
        first = invoice_service.calculate_cogs(invoice_id)
        assert invoice_service.calculate_cogs(invoice_id) is first

        invoice_service.update_product_cost(products[0], "250")

        assert invoice_service.calculate_cogs(invoice_id).amount == Decimal("760.00")

    def test_deleted_product_counts_as_zero(self, invoice_service, invoice_id, products, caplog):
        invoice_service.delete_product(products[1])

        with caplog.at_level(logging.WARNING, logger="balancebook"):
            result = invoice_service.calculate_cogs(invoice_id)

        assert result.amount == Decimal("350.00")
        assert result.missing_product_ids == (products[1],)
        assert "missing products" in caplog.text
        assert invoice_service.get_invoice(invoice_id).items[1].product_name == "Switch"

    def test_mixed_cost_currencies_warn(self, invoice_service, sample_company, caplog):
        usd = invoice_service.create_product("A", "10", "USD", cost="4")
        eur = invoice_service.create_product("B", "10", "USD", cost="3", cost_currency="EUR")
        invoice = invoice_service.create_invoice(
            "INV-9", sample_company.id, "Globex", date(2024, 1, 1), [(usd, 1), (eur, 1)]
        )

        with caplog.at_level(logging.WARNING, logger="balancebook"):
            result = invoice_service.calculate_cogs(invoice)

        assert result.mixed_currency_warning
        assert result.amount == Decimal("7.00")
        assert "mixes product cost currencies" in caplog.text


class TestRecordPayment:
    """Tests for invoice payment booking."""

    def test_payment_freezes_cogs(self, invoice_service, invoice_id):
        entry = invoice_service.record_payment(invoice_id, date(2024, 1, 20))

        assert entry.cogs == Decimal("710.00")
        assert entry.cogs_paid == Decimal("0")
        assert entry.amount == Decimal("1070")
        assert entry.category == SALES_REVENUE_CATEGORY
        assert entry.is_from_invoice
        assert entry.reference == "INV-001"
        invoice = invoice_service.get_invoice(invoice_id)
        assert invoice.status is InvoiceStatus.PAID
        assert invoice.paid_date == date(2024, 1, 20)

    def test_payment_is_idempotent(self, invoice_service, invoice_id, products):
        first = invoice_service.record_payment(invoice_id, date(2024, 1, 20))
        invoice_service.update_product_cost(products[0], "1000")

        second = invoice_service.record_payment(invoice_id, date(2024, 2, 1))

        assert second.id == first.id
        assert second.cogs == Decimal("710.00")

    def test_frozen_cogs_ignores_cost_changes(self, invoice_service, invoice_id, products):
        invoice_service.record_payment(invoice_id, date(2024, 1, 20))
        invoice_service.update_product_cost(products[0], "250")

        assert invoice_service.calculate_cogs(invoice_id).amount == Decimal("760.00")
        assert invoice_service.cogs_drift(invoice_id) == Decimal("50.00")

    def test_drift_requires_payment(self, invoice_service, invoice_id):
        with pytest.raises(NotFoundError, match="no bookkeeping entry"):
            invoice_service.cogs_drift(invoice_id)

    def test_unknown_invoice(self, invoice_service):
        with pytest.raises(NotFoundError):
            invoice_service.record_payment(123)
