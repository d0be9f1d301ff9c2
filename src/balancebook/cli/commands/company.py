"""Company management commands."""

import click
from balancebook.cli.error_handling import handle_domain_error
from balancebook.domain.account import AccountService


@click.group()
def company_group():
    """Manage companies."""
    pass


@company_group.command("create")
@click.argument("trading_name", metavar="TRADING_NAME")
@click.pass_context
def create_company(ctx, trading_name: str):
    """Create a new company.

    Examples:
        balancebook company create "Acme Trading"
    """
    service = AccountService(ctx.obj["db"], ctx.obj["cache"])
    try:
        company_id = service.create_company(trading_name)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created company '{trading_name.strip()}' (ID: {company_id})")


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    service = AccountService(ctx.obj["db"], ctx.obj["cache"])

    companies = service.list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 60)
    for company in companies:
        accounts = service.list_accounts(company_id=company.id)
        click.echo(f"ID: {company.id:3d} | {company.trading_name:30s} | Accounts: {len(accounts)}")


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
