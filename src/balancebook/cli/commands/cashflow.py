"""Cashflow commands."""

import click
from balancebook.cli.account_resolution import resolve_account_or_exit
from balancebook.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from balancebook.cli.error_handling import format_amount, handle_domain_error
from balancebook.domain.account import AccountService
from balancebook.domain.cashflow import CashflowService
from balancebook.domain.entities import (
    AccountType,
    CashflowFigures,
    CashflowGroupBy,
    CashflowType,
    DateRange,
)
from balancebook.domain.ledger import LedgerService


def _figures_line(label: str, figures: CashflowFigures, currency: str, width: int = 36) -> str:
    total = figures.total
    return (
        f"{label:{width}s} | in {format_amount(total.inflow):>14s} | "
        f"out {format_amount(total.outflow):>14s} | net {format_amount(total.net):>14s} {currency}"
    )


@click.group()
def cashflow_group():
    """Inflow/outflow summaries and manual cashflow entries."""
    pass


@cashflow_group.command("add-manual")
@click.argument("account", metavar="ACCOUNT")
@click.option("--period", required=True, help="Month in YYYY-MM form")
@click.option("--type", "flow_type", type=click.Choice([t.value for t in CashflowType]), required=True)
@click.option("--amount", required=True, help="Positive amount")
@click.option("--description", required=True, help="Description")
@click.option("--currency", help="Currency (defaults to the account's primary currency)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_manual(
    ctx,
    account: str,
    period: str,
    flow_type: str,
    amount: str,
    description: str,
    currency: str | None,
    notes: str | None,
):
    """Record a manual inflow or outflow for a month.

    Examples:
        balancebook cashflow add-manual bank:1 --period 2024-01 --type inflow --amount 500 --description "Cash sale"
    """
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, AccountService(db, ctx.obj["cache"]), account)
    try:
        entry_id = LedgerService(db, ctx.obj["cache"]).add_manual_entry(
            acc.id,
            acc.account_type,
            currency or acc.currency,
            period,
            CashflowType(flow_type),
            amount,
            description,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Recorded manual {flow_type} {entry_id} for '{acc.display_name}' in {period}")


@cashflow_group.command("delete-manual")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_manual(ctx, entry_id: int):
    """Delete a manual cashflow entry."""
    try:
        LedgerService(ctx.obj["db"], ctx.obj["cache"]).delete_manual_entry(entry_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted manual cashflow entry {entry_id}")


@cashflow_group.command("summary")
@click.option("--company", "company_id", type=int, help="Limit to one company")
@click.option(
    "--type", "account_type", type=click.Choice([t.value for t in AccountType]), help="Filter by type"
)
@click.option(
    "--group-by",
    type=click.Choice([g.value for g in CashflowGroupBy]),
    default=CashflowGroupBy.NONE.value,
    show_default=True,
)
@click.option("--breakdown", is_flag=True, help="Show automatic and manual streams separately")
@period_options
@click.pass_context
def summary(
    ctx,
    company_id: int | None,
    account_type: str | None,
    group_by: str,
    breakdown: bool,
    start_date: str | None,
    end_date: str | None,
    **kwargs,
):
    """Summarize inflows and outflows per account and currency."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    service = CashflowService(ctx.obj["db"], ctx.obj["cache"])

    try:
        result = service.aggregate_company_cashflow(
            company_id=company_id,
            date_range=DateRange(start, end),
            group_by=CashflowGroupBy(group_by),
            account_type=AccountType(account_type) if account_type else None,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not result.rows:
        click.echo("No accounts found.")
        return

    for group in result.groups:
        click.echo(f"\n{group.name}")
        click.echo("-" * 100)
        for row in group.rows:
            label = row.sub_account.display_name
            if not row.sub_account.is_declared:
                label += " [undeclared]"
            click.echo(_figures_line(label, row.figures, row.currency))
            if breakdown:
                auto, manual = row.figures.automatic, row.figures.manual
                click.echo(
                    f"{'':4s}automatic in {format_amount(auto.inflow)} out {format_amount(auto.outflow)}"
                    f" | manual in {format_amount(manual.inflow)} out {format_amount(manual.outflow)}"
                )

    click.echo("\nTotals:")
    click.echo("-" * 100)
    for currency, figures in result.totals.items():
        click.echo(_figures_line(currency, figures, currency))
    click.echo(f"\nAccounts: {result.account_count}")


@cashflow_group.command("periods")
@click.option("--company", "company_id", type=int, help="Limit to one company")
@period_options
@click.pass_context
def periods(ctx, company_id: int | None, start_date: str | None, end_date: str | None, **kwargs):
    """Show cashflow per month and currency."""
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=pop_period_flags(kwargs)
    )
    db = ctx.obj["db"]
    accounts = AccountService(db, ctx.obj["cache"]).list_accounts(
        company_id=company_id, active_only=True
    )

    try:
        by_period = CashflowService(db, ctx.obj["cache"]).period_breakdown(
            accounts, DateRange(start, end), company_id=company_id
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not by_period:
        click.echo("No cashflow found.")
        return

    for period, by_currency in by_period.items():
        for currency, figures in by_currency.items():
            click.echo(_figures_line(period, figures, currency, width=8))


def register_commands(cli):
    """Register cashflow commands with main CLI."""
    cli.add_command(cashflow_group, name="cashflow")
