"""Shared pytest fixtures for balancebook tests."""

import tempfile
import os
from datetime import date
import pytest

from balancebook.cache import InMemoryCache
from balancebook.database.factories import create_sqlite_database
from balancebook.domain.account import AccountService
from balancebook.domain.balance import BalanceService
from balancebook.domain.cashflow import CashflowService
from balancebook.domain.entities import AccountType
from balancebook.domain.invoice import InvoiceService
from balancebook.domain.ledger import LedgerService


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def clock():
    """Return a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def cache(clock):
    """Create an in-memory cache driven by the fake clock."""
    return InMemoryCache(default_ttl=30, clock=clock)


@pytest.fixture
def account_service(temp_db, cache):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db, cache)


@pytest.fixture
def ledger_service(temp_db, cache):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db, cache)


@pytest.fixture
def balance_service(temp_db, cache):
    """Create a BalanceService with a temporary database."""
    return BalanceService(temp_db, cache)


@pytest.fixture
def cashflow_service(temp_db, cache):
    """Create a CashflowService with a temporary database."""
    return CashflowService(temp_db, cache)


@pytest.fixture
def invoice_service(temp_db, cache):
    """Create an InvoiceService with a temporary database."""
    return InvoiceService(temp_db, cache)


@pytest.fixture
def sample_company(account_service):
    """Create a sample company for testing."""
    company_id = account_service.create_company("Acme Trading")
    return account_service.get_company(company_id)


@pytest.fixture
def bank_account(account_service, sample_company):
    """Create a USD bank account for testing."""
    account_id = account_service.create_bank_account(
        sample_company.id, "Operating", "USD", bank_name="First Bank"
    )
    return account_service.get_account(account_id, AccountType.BANK)


@pytest.fixture
def wallet(account_service, sample_company):
    """Create a USDT wallet that also holds BTC and ETH."""
    account_id = account_service.create_wallet(
        sample_company.id, "Treasury", "USDT", currencies="BTC, eth"
    )
    return account_service.get_account(account_id, AccountType.WALLET)


@pytest.fixture
def january():
    """Return the inclusive January 2024 date bounds."""
    return date(2024, 1, 1), date(2024, 1, 31)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
