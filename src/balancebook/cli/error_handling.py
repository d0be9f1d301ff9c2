"""CLI error handling and output formatting helpers."""

from decimal import Decimal
from typing import Optional

import click

from balancebook.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def format_amount(amount: Optional[Decimal], currency: str = "") -> str:
    """Format an amount with thousands separators and two decimals."""
    if amount is None:
        return "n/a"
    text = f"{amount:,.2f}"
    return f"{text} {currency}" if currency else text
