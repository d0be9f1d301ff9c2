"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from balancebook.domain.account import AccountService
from balancebook.domain.entities import Account
from balancebook.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> Account:
    """Resolve an account reference ("bank:1", "wallet:2", ID or name), or exit.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
