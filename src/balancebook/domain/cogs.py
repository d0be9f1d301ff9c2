"""Cost of goods sold calculation."""

from typing import Iterable, Mapping
from decimal import Decimal, ROUND_HALF_UP

from balancebook.domain.entities import COGSResult, Invoice, Product, ZERO
from balancebook.domain.errors import ValidationError

CENTS = Decimal("0.01")


def calculate_invoice_cogs(
    invoice: Invoice, products: Iterable[Product] | Mapping[int, Product]
) -> COGSResult:
    """Calculate the cost of goods sold for an invoice.

    Each item contributes ``product.cost * item.quantity`` when its product
    is among ``products``, and zero otherwise; the unmatched product IDs are
    reported. Costs are summed as-is without conversion, so the result
    carries the first matched cost currency and a warning flag when
    products with different cost currencies were mixed.

    Args:
        invoice: Invoice with items
        products: Products to price the items with, as a list or ID mapping

    Returns:
        COGSResult with the amount rounded half-up to cents

    Raises:
        ValidationError: If an item quantity or a matched product cost is negative
    """
    if isinstance(products, Mapping):
        by_id = dict(products)
    else:
        by_id = {product.id: product for product in products}

    total = ZERO
    currencies: list[str] = []
    missing: list[int] = []

    for item in invoice.items:
        if item.quantity < 0:
            raise ValidationError(
                f"Invoice {invoice.invoice_number}: item '{item.product_name}' has negative quantity"
            )
        product = by_id.get(item.product_id) if item.product_id is not None else None
        if product is None:
            if item.product_id is not None and item.product_id not in missing:
                missing.append(item.product_id)
            continue
        if product.cost < 0:
            raise ValidationError(f"Product {product.id} has negative cost {product.cost}")

        total += product.cost * item.quantity
        if product.cost_currency not in currencies:
            currencies.append(product.cost_currency)

    return COGSResult(
        amount=total.quantize(CENTS, rounding=ROUND_HALF_UP),
        currency=currencies[0] if currencies else None,
        mixed_currency_warning=len(currencies) > 1,
        missing_product_ids=tuple(missing),
    )
