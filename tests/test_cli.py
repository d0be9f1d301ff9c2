"""CLI workflow tests."""

import pytest

from balancebook.cli.main import cli


def _invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


@pytest.fixture
def cli_company(cli_runner, temp_db):
    """Create a company through the CLI and return its ID."""
    result = _invoke(cli_runner, temp_db, "company", "create", "Acme Trading")
    assert result.exit_code == 0
    return 1


@pytest.fixture
def cli_accounts(cli_runner, temp_db, cli_company):
    """Create bank:1 (USD) and wallet:2 (USDT, BTC) through the CLI."""
    result = _invoke(
        cli_runner,
        temp_db,
        "account",
        "create-bank",
        "Operating",
        "--company",
        "1",
        "--currency",
        "usd",
        "--bank",
        "First Bank",
    )
    assert result.exit_code == 0
    assert "(bank:1)" in result.output

    result = _invoke(
        cli_runner,
        temp_db,
        "account",
        "create-wallet",
        "Treasury",
        "--company",
        "1",
        "--currency",
        "USDT",
        "--currencies",
        "BTC",
    )
    assert result.exit_code == 0
    assert "(wallet:2)" in result.output


def test_help_does_not_touch_database(cli_runner, tmp_path):
    result = cli_runner.invoke(cli, ["--db-path", str(tmp_path / "never.db"), "--help"])

    assert result.exit_code == 0
    assert "Ledger balances and cashflow" in result.output
    assert not (tmp_path / "never.db").exists()


class TestCompanyCommands:
    """Tests for company commands."""

    def test_create_and_list(self, cli_runner, temp_db, cli_company):
        result = _invoke(cli_runner, temp_db, "company", "list")

        assert result.exit_code == 0
        assert "Acme Trading" in result.output

    def test_duplicate_exits_with_error(self, cli_runner, temp_db, cli_company):
        result = _invoke(cli_runner, temp_db, "company", "create", "Acme Trading")

        assert result.exit_code == 1
        assert "Error: Company with name 'Acme Trading' already exists" in result.output

    def test_empty_list(self, cli_runner, temp_db):
        result = _invoke(cli_runner, temp_db, "company", "list")

        assert "No companies found." in result.output


class TestAccountCommands:
    """Tests for account commands."""

    def test_list_shows_currencies(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(cli_runner, temp_db, "account", "list")

        assert result.exit_code == 0
        assert "First Bank - Operating" in result.output
        assert "USDT, BTC" in result.output

    def test_expand(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(cli_runner, temp_db, "account", "expand", "Treasury")

        assert result.exit_code == 0
        assert "wallet:2:USDT" in result.output
        assert "wallet:2:BTC" in result.output
        assert "uninitialized" in result.output

    def test_deactivate_hides_account(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(cli_runner, temp_db, "account", "deactivate", "wallet:2")
        assert result.exit_code == 0

        result = _invoke(cli_runner, temp_db, "account", "list")
        assert "Treasury" not in result.output

        result = _invoke(cli_runner, temp_db, "account", "list", "--all")
        assert "(inactive)" in result.output

    def test_unknown_company(self, cli_runner, temp_db):
        result = _invoke(
            cli_runner, temp_db, "account", "create-bank", "X", "--company", "9", "--currency", "USD"
        )

        assert result.exit_code == 1
        assert "Company 9 not found" in result.output

    def test_unknown_account_reference(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(cli_runner, temp_db, "account", "expand", "bank:99")

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestBalanceCommands:
    """Tests for balance commands."""

    def test_opening_balance_and_transactions(self, cli_runner, temp_db, cli_accounts):
        assert _invoke(cli_runner, temp_db, "balance", "set", "bank:1", "100").exit_code == 0
        assert _invoke(
            cli_runner, temp_db, "transaction", "add", "bank:1", "--date", "2025-01-05", "--incoming", "50"
        ).exit_code == 0
        assert _invoke(
            cli_runner, temp_db, "transaction", "add", "bank:1", "--date", "2025-01-20", "--outgoing", "30"
        ).exit_code == 0

        mid = _invoke(cli_runner, temp_db, "balance", "show", "bank:1", "--as-of", "2025-01-10")
        end = _invoke(cli_runner, temp_db, "balance", "show", "bank:1")

        assert mid.exit_code == 0
        assert "150.00 USD" in mid.output
        assert "120.00 USD" in end.output

    def test_show_without_opening_balance(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(cli_runner, temp_db, "balance", "show", "wallet:2", "--currency", "BTC")

        assert result.exit_code == 0
        assert "Treasury (BTC)" in result.output
        assert "no opening balance set" in result.output

    def test_invalid_currency(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(cli_runner, temp_db, "balance", "show", "bank:1", "--currency", "$$")

        assert result.exit_code == 1
        assert "Invalid currency code" in result.output

    def test_list_with_totals(self, cli_runner, temp_db, cli_accounts):
        _invoke(cli_runner, temp_db, "balance", "set", "bank:1", "100")
        _invoke(cli_runner, temp_db, "balance", "set", "wallet:2", "--currency", "USDT", "--", "-25")

        result = _invoke(cli_runner, temp_db, "balance", "list")

        assert result.exit_code == 0
        assert "Accounts: 2 (1 bank, 1 wallet)" in result.output
        assert "liabilities 25.00" in result.output
        assert "net worth 100.00" in result.output

    def test_list_flags_undeclared_currency(self, cli_runner, temp_db, cli_accounts):
        _invoke(
            cli_runner,
            temp_db,
            "transaction",
            "add",
            "bank:1",
            "--date",
            "2024-03-01",
            "--incoming",
            "500",
            "--currency",
            "EUR",
        )

        result = _invoke(cli_runner, temp_db, "balance", "list")

        assert result.exit_code == 0
        assert "bank:1:EUR" in result.output
        assert "[undeclared]" in result.output
        assert "assets 500.00" in result.output


class TestTransactionCommands:
    """Tests for transaction commands."""

    def test_add_list_delete(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(
            cli_runner,
            temp_db,
            "transaction",
            "add",
            "wallet:2",
            "--date",
            "2024-03-01",
            "--incoming",
            "0.5",
            "--currency",
            "btc",
            "--description",
            "Deposit",
        )
        assert result.exit_code == 0
        assert "Posted transaction 1" in result.output

        result = _invoke(cli_runner, temp_db, "transaction", "list", "wallet:2")
        assert "Deposit" in result.output
        assert "BTC" in result.output

        result = _invoke(cli_runner, temp_db, "transaction", "delete", "1", "--yes")
        assert result.exit_code == 0

        result = _invoke(cli_runner, temp_db, "transaction", "list", "wallet:2")
        assert "No transactions found." in result.output

        result = _invoke(cli_runner, temp_db, "transaction", "delete", "1", "--yes")
        assert result.exit_code == 1
        assert "already deleted" in result.output

    def test_delete_can_be_cancelled(self, cli_runner, temp_db, cli_accounts):
        _invoke(cli_runner, temp_db, "transaction", "add", "bank:1", "--date", "2024-03-01", "--incoming", "1")

        result = _invoke(cli_runner, temp_db, "transaction", "delete", "1", input="n\n")

        assert "Deletion cancelled." in result.output

    def test_negative_amount(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(
            cli_runner, temp_db, "transaction", "add", "bank:1", "--date", "2024-03-01", "--incoming", "-5"
        )

        assert result.exit_code == 1
        assert "must not be negative" in result.output

    def test_invalid_date(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(cli_runner, temp_db, "transaction", "add", "bank:1", "--date", "someday")

        assert result.exit_code == 1
        assert "Invalid date format" in result.output


class TestCashflowCommands:
    """Tests for cashflow commands."""

    @pytest.fixture
    def january_activity(self, cli_runner, temp_db, cli_accounts):
        _invoke(
            cli_runner,
            temp_db,
            "transaction",
            "add",
            "bank:1",
            "--date",
            "2024-01-10",
            "--incoming",
            "300",
            "--outgoing",
            "100",
        )
        result = _invoke(
            cli_runner,
            temp_db,
            "cashflow",
            "add-manual",
            "bank:1",
            "--period",
            "2024-01",
            "--type",
            "inflow",
            "--amount",
            "500",
            "--description",
            "Cash sales",
        )
        assert result.exit_code == 0

    def test_summary(self, cli_runner, temp_db, january_activity):
        result = _invoke(
            cli_runner,
            temp_db,
            "cashflow",
            "summary",
            "--start-date",
            "2024-01-01",
            "--end-date",
            "2024-01-31",
            "--breakdown",
        )

        assert result.exit_code == 0
        assert "All accounts" in result.output
        assert "800.00" in result.output
        assert "700.00" in result.output
        assert "manual in 500.00" in result.output
        assert "Totals:" in result.output
        assert "Accounts: 2" in result.output

    def test_summary_grouped_by_currency(self, cli_runner, temp_db, january_activity):
        result = _invoke(cli_runner, temp_db, "cashflow", "summary", "--group-by", "currency")

        assert result.exit_code == 0
        for currency in ("BTC", "USD", "USDT"):
            assert f"\n{currency}\n" in result.output

    def test_summary_unknown_company(self, cli_runner, temp_db, cli_company):
        result = _invoke(cli_runner, temp_db, "cashflow", "summary", "--company", "5")

        assert result.exit_code == 1
        assert "Company 5 not found" in result.output

    def test_summary_no_accounts(self, cli_runner, temp_db, cli_company):
        result = _invoke(cli_runner, temp_db, "cashflow", "summary", "--company", "1")

        assert "No accounts found." in result.output

    def test_summary_rejects_inverted_range(self, cli_runner, temp_db, january_activity):
        result = _invoke(
            cli_runner, temp_db, "cashflow", "summary", "--start-date", "2024-02-01", "--end-date", "2024-01-01"
        )

        assert result.exit_code == 1

    def test_periods(self, cli_runner, temp_db, january_activity):
        result = _invoke(cli_runner, temp_db, "cashflow", "periods")

        assert result.exit_code == 0
        assert "2024-01" in result.output
        assert "700.00 USD" in result.output

    def test_manual_entry_validation(self, cli_runner, temp_db, cli_accounts):
        result = _invoke(
            cli_runner,
            temp_db,
            "cashflow",
            "add-manual",
            "bank:1",
            "--period",
            "2024-13",
            "--type",
            "outflow",
            "--amount",
            "5",
            "--description",
            "x",
        )

        assert result.exit_code == 1
        assert "expected YYYY-MM" in result.output

    def test_delete_manual(self, cli_runner, temp_db, january_activity):
        assert _invoke(cli_runner, temp_db, "cashflow", "delete-manual", "1").exit_code == 0

        result = _invoke(cli_runner, temp_db, "cashflow", "delete-manual", "1")
        assert result.exit_code == 1


class TestInvoiceCommands:
    """Tests for product and invoice commands."""

    @pytest.fixture
    def cli_invoice(self, cli_runner, temp_db, cli_company):
        for name, price, cost in [("Router", "350", "200"), ("Switch", "180", "120"), ("Cables", "90", "75")]:
            result = _invoke(
                cli_runner, temp_db, "product", "add", name, "--price", price, "--currency", "USD", "--cost", cost
            )
            assert result.exit_code == 0

        result = _invoke(
            cli_runner,
            temp_db,
            "invoice",
            "create",
            "INV-001",
            "--company",
            "1",
            "--client",
            "Globex",
            "--date",
            "2024-01-10",
            "--item",
            "1",
            "--item",
            "2:3",
            "--item",
            "3:2",
        )
        assert result.exit_code == 0
        assert "total 1,070.00 USD" in result.output

    def test_cogs_and_payment(self, cli_runner, temp_db, cli_invoice):
        result = _invoke(cli_runner, temp_db, "invoice", "cogs", "1")
        assert "COGS: 710.00 USD" in result.output

        result = _invoke(cli_runner, temp_db, "invoice", "pay", "1", "--date", "2024-01-20")
        assert result.exit_code == 0
        assert "COGS 710.00" in result.output

        _invoke(cli_runner, temp_db, "product", "set-cost", "1", "250")

        result = _invoke(cli_runner, temp_db, "invoice", "cogs", "1")
        assert "COGS: 760.00 USD" in result.output
        assert "Frozen at payment: 710.00 (drift 50.00)" in result.output

    def test_deleted_product_warning(self, cli_runner, temp_db, cli_invoice):
        assert _invoke(cli_runner, temp_db, "product", "delete", "2").exit_code == 0

        result = _invoke(cli_runner, temp_db, "invoice", "cogs", "1")

        assert "COGS: 350.00 USD" in result.output
        assert "missing products counted as zero cost: 2" in result.output

    def test_bad_item_reference(self, cli_runner, temp_db, cli_company):
        result = _invoke(
            cli_runner,
            temp_db,
            "invoice",
            "create",
            "INV-2",
            "--company",
            "1",
            "--client",
            "Globex",
            "--item",
            "router",
        )

        assert result.exit_code == 1
        assert "expected PRODUCT_ID[:QUANTITY]" in result.output

    def test_unknown_invoice(self, cli_runner, temp_db, cli_company):
        result = _invoke(cli_runner, temp_db, "invoice", "pay", "9")

        assert result.exit_code == 1
        assert "Invoice 9 not found" in result.output
