"""Ledger transaction commands."""

import click
from balancebook.cli.account_resolution import resolve_account_or_exit
from balancebook.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from balancebook.cli.error_handling import format_amount, handle_domain_error
from balancebook.domain.account import AccountService
from balancebook.domain.ledger import LedgerService
from balancebook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage ledger transactions."""
    pass


@transaction_group.command("add")
@click.argument("account", metavar="ACCOUNT")
@click.option("--date", "date_str", required=True, help="Transaction date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--incoming", default="0", help="Amount received")
@click.option("--outgoing", default="0", help="Amount paid out")
@click.option("--currency", help="Currency (defaults to the account's primary currency)")
@click.option("--description", help="Transaction description")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    date_str: str,
    incoming: str,
    outgoing: str,
    currency: str | None,
    description: str | None,
) -> None:
    """Post a transaction to an account.

    Examples:
        balancebook transaction add bank:1 --date 2024-01-15 --incoming 100
        balancebook transaction add wallet:2 --date today --outgoing 0.1 --currency BTC
    """
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, AccountService(db, ctx.obj["cache"]), account)

    try:
        txn_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        transaction_id = LedgerService(db, ctx.obj["cache"]).post_transaction(
            acc.id,
            acc.account_type,
            currency or acc.currency,
            txn_date,
            incoming_amount=incoming,
            outgoing_amount=outgoing,
            description=description,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted transaction {transaction_id} to '{acc.display_name}'")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction (it stays in the ledger marked as deleted)."""
    service = LedgerService(ctx.obj["db"], ctx.obj["cache"])

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("list")
@click.argument("account", metavar="ACCOUNT")
@click.option("--currency", help="Only this currency")
@period_options
@click.pass_context
def list_transactions(ctx, account: str, currency: str | None, start_date, end_date, **kwargs) -> None:
    """List active transactions of an account."""
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, AccountService(db, ctx.obj["cache"]), account)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )

    try:
        transactions = LedgerService(db, ctx.obj["cache"]).list_transactions(
            acc.id, acc.account_type, currency=currency, date_from=start, date_to=end
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nTransactions for {acc.display_name}:")
    click.echo("-" * 90)
    for txn in transactions:
        click.echo(
            f"{txn.id:5d} | {txn.date.date()} | {txn.currency:6s} | "
            f"in {format_amount(txn.incoming_amount):>14s} | "
            f"out {format_amount(txn.outgoing_amount):>14s} | {txn.description or ''}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
