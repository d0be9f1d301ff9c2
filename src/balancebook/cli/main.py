"""Main CLI entry point."""

import click
from balancebook.cache import create_cache
from balancebook.config import load_settings
from balancebook.database.factories import create_sqlite_database
from balancebook.domain.errors import ValidationError
from balancebook.logging_config import setup_logging

# Import and register all commands at module level
from balancebook.cli.commands import (
    company,
    account,
    balance,
    transaction,
    cashflow,
    invoice,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BALANCEBOOK_DB_PATH environment variable)",
    envvar="BALANCEBOOK_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides BALANCEBOOK_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """Balancebook - Ledger balances and cashflow.

    Track companies, bank accounts and multi-currency wallets, resolve
    point-in-time balances and summarize inflows and outflows.
    """
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            settings = load_settings()
        except ValidationError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
        setup_logging(log_level or settings.log_level)

        db = create_sqlite_database(database_path=db_path or settings.db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["cache"] = create_cache(settings.cache_ttl)
        ctx.obj["settings"] = settings


# Register all commands
company.register_commands(cli)
account.register_commands(cli)
balance.register_commands(cli)
transaction.register_commands(cli)
cashflow.register_commands(cli)
invoice.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
