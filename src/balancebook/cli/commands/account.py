"""Bank account and wallet commands."""

import click
from balancebook.cli.account_resolution import resolve_account_or_exit
from balancebook.cli.error_handling import handle_domain_error
from balancebook.domain.account import AccountService
from balancebook.domain.entities import AccountType
from balancebook.domain.multi_currency import AccountExpander, account_currencies


@click.group()
def account_group():
    """Manage bank accounts and wallets."""
    pass


@account_group.command("create-bank")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--company", "company_id", type=int, required=True, help="Owning company ID")
@click.option("--currency", required=True, help="Account currency (e.g., USD)")
@click.option("--bank", help="Bank name")
@click.pass_context
def create_bank(ctx, name: str, company_id: int, currency: str, bank: str | None):
    """Create a bank account.

    Examples:
        balancebook account create-bank "Operating" --company 1 --currency USD --bank "Chase"
    """
    service = AccountService(ctx.obj["db"], ctx.obj["cache"])
    try:
        account_id = service.create_bank_account(company_id, name, currency, bank_name=bank)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created bank account '{name}' (bank:{account_id})")


@account_group.command("create-wallet")
@click.argument("name", metavar="WALLET_NAME")
@click.option("--company", "company_id", type=int, required=True, help="Owning company ID")
@click.option("--currency", required=True, help="Primary currency (e.g., USDT)")
@click.option("--currencies", help="Additional currencies, comma separated (e.g., 'BTC,ETH')")
@click.pass_context
def create_wallet(ctx, name: str, company_id: int, currency: str, currencies: str | None):
    """Create a wallet, optionally holding several currencies.

    Examples:
        balancebook account create-wallet "Treasury" --company 1 --currency USDT --currencies BTC,ETH
    """
    service = AccountService(ctx.obj["db"], ctx.obj["cache"])
    try:
        account_id = service.create_wallet(company_id, name, currency, currencies=currencies)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created wallet '{name}' (wallet:{account_id})")


@account_group.command("list")
@click.option("--company", "company_id", type=int, help="Filter by company ID")
@click.option(
    "--type", "account_type", type=click.Choice([t.value for t in AccountType]), help="Filter by type"
)
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(ctx, company_id: int | None, account_type: str | None, include_inactive: bool):
    """List accounts."""
    service = AccountService(ctx.obj["db"], ctx.obj["cache"])

    accounts = service.list_accounts(
        company_id=company_id,
        account_type=AccountType(account_type) if account_type else None,
        active_only=not include_inactive,
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        ref = f"{acc.account_type.value}:{acc.id}"
        status = "" if acc.is_active else " (inactive)"
        currencies = ", ".join(account_currencies(acc))
        click.echo(f"{ref:12s} | {acc.display_name:30s} | Company: {acc.company_id:3d} | {currencies}{status}")


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str):
    """Deactivate an account; its history is kept.

    ACCOUNT can be bank:<id>, wallet:<id>, an ID or a name.
    """
    service = AccountService(ctx.obj["db"], ctx.obj["cache"])
    acc = resolve_account_or_exit(ctx, service, account)
    try:
        service.deactivate_account(acc.id, acc.account_type)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deactivated {acc.account_type.value} account '{acc.display_name}'")


@account_group.command("expand")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def expand_account(ctx, account: str):
    """Show the per-currency sub-accounts of an account.

    Sub-accounts without an opening balance are marked as uninitialized.
    """
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, AccountService(db, ctx.obj["cache"]), account)

    for sub in AccountExpander(db).expand_account(acc):
        state = "opening balance set" if sub.has_opening_balance else "uninitialized"
        click.echo(f"{sub.key:24s} | {sub.display_name:30s} | {state}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
