"""Tests for cost of goods sold calculation."""

from datetime import date
from decimal import Decimal

import pytest

from balancebook.domain.cogs import calculate_invoice_cogs
from balancebook.domain.entities import Invoice, InvoiceItem, InvoiceStatus, Product
from balancebook.domain.errors import ValidationError


def _product(product_id, cost, cost_currency="USD"):
    return Product(
        id=product_id,
        name=f"Product {product_id}",
        price=Decimal("999"),
        currency="USD",
        cost=Decimal(cost),
        cost_currency=cost_currency,
    )


def _invoice(*lines):
    items = tuple(
        InvoiceItem(
            id=i,
            invoice_id=1,
            product_id=product_id,
            product_name=f"Product {product_id}",
            quantity=Decimal(quantity),
            unit_price=Decimal("10"),
            currency="USD",
            total=Decimal(quantity) * Decimal("10"),
        )
        for i, (product_id, quantity) in enumerate(lines, start=1)
    )
    return Invoice(
        id=1,
        invoice_number="INV-1",
        company_id=1,
        client_name="Globex",
        currency="USD",
        status=InvoiceStatus.SENT,
        total_amount=sum((item.total for item in items), Decimal("0")),
        issue_date=date(2024, 1, 10),
        items=items,
    )


def test_cogs_sums_cost_times_quantity():
    invoice = _invoice((1, "1"), (2, "3"), (3, "2"))
    products = [_product(1, "200"), _product(2, "120"), _product(3, "75")]

    result = calculate_invoice_cogs(invoice, products)

    assert result.amount == Decimal("710.00")
    assert result.currency == "USD"
    assert not result.mixed_currency_warning
    assert result.missing_product_ids == ()


def test_cogs_accepts_product_mapping():
    invoice = _invoice((1, "2"))

    result = calculate_invoice_cogs(invoice, {1: _product(1, "4.5")})

    assert result.amount == Decimal("9.00")


def test_missing_product_counts_as_zero():
    invoice = _invoice((1, "1"), (7, "5"), (None, "1"))

    result = calculate_invoice_cogs(invoice, [_product(1, "200")])

    assert result.amount == Decimal("200.00")
    assert result.missing_product_ids == (7,)


def test_no_matching_products():
    result = calculate_invoice_cogs(_invoice((5, "1")), [])

    assert result.amount == Decimal("0.00")
    assert result.currency is None


def test_mixed_cost_currencies_are_flagged():
    invoice = _invoice((1, "1"), (2, "1"))
    products = [_product(1, "10", "EUR"), _product(2, "5", "USD")]

    result = calculate_invoice_cogs(invoice, products)

    assert result.amount == Decimal("15.00")
    assert result.currency == "EUR"
    assert result.mixed_currency_warning


def test_rounds_half_up_to_cents():
    invoice = _invoice((1, "3"))

    assert calculate_invoice_cogs(invoice, [_product(1, "0.335")]).amount == Decimal("1.01")
    assert calculate_invoice_cogs(_invoice((1, "1")), [_product(1, "0.005")]).amount == Decimal("0.01")


def test_negative_quantity_is_rejected():
    with pytest.raises(ValidationError, match="negative quantity"):
        calculate_invoice_cogs(_invoice((1, "-1")), [_product(1, "10")])


def test_negative_cost_is_rejected():
    with pytest.raises(ValidationError, match="negative cost"):
        calculate_invoice_cogs(_invoice((1, "1")), [_product(1, "-10")])
