"""Product and invoice commands."""

import click
from balancebook.cli.error_handling import format_amount, handle_domain_error
from balancebook.domain.invoice import InvoiceService
from balancebook.utils.amount_parser import parse_amount
from balancebook.utils.date_parser import parse_date


@click.group()
def product_group():
    """Manage products."""
    pass


@product_group.command("add")
@click.argument("name", metavar="PRODUCT_NAME")
@click.option("--price", required=True, help="Sale price")
@click.option("--currency", required=True, help="Sale price currency")
@click.option("--cost", default="0", help="Unit cost")
@click.option("--cost-currency", help="Cost currency (defaults to --currency)")
@click.pass_context
def add_product(ctx, name: str, price: str, currency: str, cost: str, cost_currency: str | None):
    """Create a product.

    Examples:
        balancebook product add "Widget" --price 250 --currency USD --cost 150
    """
    service = InvoiceService(ctx.obj["db"], ctx.obj["cache"])
    try:
        product_id = service.create_product(name, price, currency, cost, cost_currency)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created product '{name}' (ID: {product_id})")


@product_group.command("set-cost")
@click.argument("product_id", type=int)
@click.argument("cost")
@click.option("--cost-currency", help="New cost currency")
@click.pass_context
def set_cost(ctx, product_id: int, cost: str, cost_currency: str | None):
    """Change a product's unit cost."""
    service = InvoiceService(ctx.obj["db"], ctx.obj["cache"])
    try:
        service.update_product_cost(product_id, cost, cost_currency)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated cost of product {product_id} to {cost}")


@product_group.command("delete")
@click.argument("product_id", type=int)
@click.pass_context
def delete_product(ctx, product_id: int):
    """Delete a product. Existing invoices keep their line items."""
    service = InvoiceService(ctx.obj["db"], ctx.obj["cache"])
    try:
        service.delete_product(product_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted product {product_id}")


def _parse_item(ctx, raw: str) -> tuple[int, object]:
    product, _, quantity = raw.partition(":")
    try:
        return int(product), parse_amount(quantity or "1")
    except ValueError:
        click.echo(f"Error: Invalid item '{raw}': expected PRODUCT_ID[:QUANTITY]", err=True)
        ctx.exit(1)


@click.group()
def invoice_group():
    """Manage invoices and their cost of goods sold."""
    pass


@invoice_group.command("create")
@click.argument("invoice_number")
@click.option("--company", "company_id", type=int, required=True, help="Issuing company ID")
@click.option("--client", "client_name", required=True, help="Client name")
@click.option("--date", "date_str", default="today", show_default=True, help="Issue date")
@click.option("--item", "items", multiple=True, required=True, help="PRODUCT_ID[:QUANTITY], repeatable")
@click.option("--currency", help="Invoice currency (defaults to the first item's currency)")
@click.pass_context
def create_invoice(
    ctx,
    invoice_number: str,
    company_id: int,
    client_name: str,
    date_str: str,
    items: tuple[str, ...],
    currency: str | None,
):
    """Create an invoice.

    Examples:
        balancebook invoice create INV-001 --company 1 --client "Globex" --item 1:2 --item 2
    """
    service = InvoiceService(ctx.obj["db"], ctx.obj["cache"])
    try:
        issue_date = parse_date(date_str)
        invoice_id = service.create_invoice(
            invoice_number,
            company_id,
            client_name,
            issue_date,
            [_parse_item(ctx, raw) for raw in items],
            currency=currency,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    invoice = service.get_invoice(invoice_id)
    click.echo(
        f"Created invoice {invoice.invoice_number} (ID: {invoice_id}) "
        f"total {format_amount(invoice.total_amount, invoice.currency)}"
    )


@invoice_group.command("cogs")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_cogs(ctx, invoice_id: int):
    """Show the cost of goods sold of an invoice."""
    service = InvoiceService(ctx.obj["db"], ctx.obj["cache"])
    try:
        result = service.calculate_cogs(invoice_id)
        entry = ctx.obj["db"].find_bookkeeping_entry_for_invoice(invoice_id)
        drift = service.cogs_drift(invoice_id) if entry is not None else None
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"COGS: {format_amount(result.amount, result.currency or '')}")
    if result.mixed_currency_warning:
        click.echo("Warning: product costs are in different currencies and were summed as-is")
    if result.missing_product_ids:
        ids = ", ".join(str(i) for i in result.missing_product_ids)
        click.echo(f"Warning: missing products counted as zero cost: {ids}")
    if entry is not None:
        click.echo(f"Frozen at payment: {format_amount(entry.cogs)} (drift {format_amount(drift)})")


@invoice_group.command("pay")
@click.argument("invoice_id", type=int)
@click.option("--date", "date_str", default="today", show_default=True, help="Payment date")
@click.pass_context
def pay_invoice(ctx, invoice_id: int, date_str: str):
    """Mark an invoice paid and book its revenue with frozen COGS."""
    service = InvoiceService(ctx.obj["db"], ctx.obj["cache"])
    try:
        entry = service.record_payment(invoice_id, parse_date(date_str))
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(
        f"Invoice {invoice_id} paid: entry {entry.id} "
        f"revenue {format_amount(entry.amount, entry.currency)} COGS {format_amount(entry.cogs)}"
    )


def register_commands(cli):
    """Register product and invoice commands with main CLI."""
    cli.add_command(product_group, name="product")
    cli.add_command(invoice_group, name="invoice")
