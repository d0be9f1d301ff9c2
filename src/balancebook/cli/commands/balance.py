"""Balance commands."""

import click
from balancebook.cli.account_resolution import resolve_account_or_exit
from balancebook.cli.error_handling import format_amount, handle_domain_error
from balancebook.domain.account import AccountService
from balancebook.domain.balance import BalanceService, summarize_balances
from balancebook.domain.entities import AccountType
from balancebook.domain.ledger import LedgerService
from balancebook.utils.date_parser import parse_date


def _parse_as_of(ctx, as_of: str | None):
    if as_of is None:
        return None
    try:
        return parse_date(as_of)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)


@click.group()
def balance_group():
    """Opening balances and point-in-time balances."""
    pass


@balance_group.command("set")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount")
@click.option("--currency", help="Currency (defaults to the account's primary currency)")
@click.option("--notes", help="Notes")
@click.pass_context
def set_opening_balance(ctx, account: str, amount: str, currency: str | None, notes: str | None):
    """Set the opening balance of an account in one currency.

    Examples:
        balancebook balance set bank:1 100.00
        balancebook balance set wallet:2 0.5 --currency BTC
    """
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, AccountService(db, ctx.obj["cache"]), account)
    currency = currency or acc.currency

    try:
        LedgerService(db, ctx.obj["cache"]).set_opening_balance(
            acc.id, acc.account_type, currency, amount, notes=notes
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Opening balance of '{acc.display_name}' set to {amount} {currency.upper()}")


@balance_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.option("--currency", help="Currency (defaults to the account's primary currency)")
@click.option("--as-of", help="Include transactions up to this date (e.g., 2024-01-31, 'today')")
@click.pass_context
def show_balance(ctx, account: str, currency: str | None, as_of: str | None):
    """Show the balance of an account in one currency."""
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, AccountService(db, ctx.obj["cache"]), account)
    as_of_date = _parse_as_of(ctx, as_of)

    try:
        result = BalanceService(db, ctx.obj["cache"]).get_account_balance(
            acc.id, acc.account_type, currency or acc.currency, as_of_date
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    cur = result.currency
    click.echo(f"\n{result.sub_account.display_name}" + (f" as of {as_of_date}" if as_of_date else ""))
    click.echo("-" * 50)
    click.echo(f"{'Opening balance:':22s} {format_amount(result.opening_balance, cur):>26s}")
    click.echo(f"{'Incoming:':22s} {format_amount(result.incoming_amount, cur):>26s}")
    click.echo(f"{'Outgoing:':22s} {format_amount(result.outgoing_amount, cur):>26s}")
    click.echo(f"{'Balance:':22s} {format_amount(result.final_balance, cur):>26s}")
    if not result.sub_account.has_opening_balance:
        click.echo("Note: no opening balance set (treated as zero)")


@balance_group.command("list")
@click.option("--company", "company_id", type=int, help="Filter by company ID")
@click.option(
    "--type", "account_type", type=click.Choice([t.value for t in AccountType]), help="Filter by type"
)
@click.option("--as-of", help="Include transactions up to this date")
@click.pass_context
def list_balances(ctx, company_id: int | None, account_type: str | None, as_of: str | None):
    """List balances of all active accounts with per-currency totals."""
    as_of_date = _parse_as_of(ctx, as_of)
    service = BalanceService(ctx.obj["db"], ctx.obj["cache"])

    balances = service.list_account_balances(
        company_id=company_id,
        account_type=AccountType(account_type) if account_type else None,
        as_of=as_of_date,
    )
    if not balances:
        click.echo("No accounts found.")
        return

    click.echo("\nBalances:")
    click.echo("-" * 80)
    for b in balances:
        amount = format_amount(b.final_balance, b.currency) if b.available else b.error
        label = b.sub_account.display_name
        if not b.sub_account.is_declared:
            label += " [undeclared]"
        click.echo(f"{b.sub_account.key:24s} | {label:30s} | {amount:>20s}")

    summary = summarize_balances(balances)
    click.echo("-" * 80)
    click.echo(
        f"Accounts: {summary.account_count} "
        f"({summary.bank_account_count} bank, {summary.wallet_count} wallet)"
    )
    if summary.unavailable_count:
        click.echo(f"Unavailable balances: {summary.unavailable_count}")
    for currency, totals in summary.by_currency.items():
        click.echo(
            f"{currency:8s} assets {format_amount(totals.assets)} | "
            f"liabilities {format_amount(totals.liabilities)} | "
            f"net worth {format_amount(totals.net_worth)}"
        )


def register_commands(cli):
    """Register balance commands with main CLI."""
    cli.add_command(balance_group, name="balance")
