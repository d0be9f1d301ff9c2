"""Tests for the ledger write service."""

import logging
from datetime import date, datetime
from decimal import Decimal

import pytest

from balancebook.domain.entities import AccountType, CashflowType
from balancebook.domain.errors import ConflictError, NotFoundError, ValidationError


class TestOpeningBalance:
    """Tests for opening balance upsert."""

    def test_set_and_replace(self, ledger_service, bank_account):
        first = ledger_service.set_opening_balance(bank_account.id, AccountType.BANK, "usd", "100")
        second = ledger_service.set_opening_balance(bank_account.id, AccountType.BANK, "USD", Decimal("-5"))

        assert first == second
        balance = ledger_service.get_opening_balance(bank_account.id, AccountType.BANK, "USD")
        assert balance.amount == Decimal("-5")

    def test_unknown_account(self, ledger_service):
        with pytest.raises(NotFoundError):
            ledger_service.set_opening_balance(5, AccountType.WALLET, "BTC", "1")

    def test_float_amount_rejected(self, ledger_service, bank_account):
        with pytest.raises(ValidationError):
            ledger_service.set_opening_balance(bank_account.id, AccountType.BANK, "USD", 10.5)


class TestTransactions:
    """Tests for posting and deleting transactions."""

    def test_bare_date_stored_at_midnight(self, ledger_service, bank_account):
        txn_id = ledger_service.post_transaction(
            bank_account.id, AccountType.BANK, "USD", date(2024, 1, 15), incoming_amount="12.50"
        )

        txn = ledger_service.get_transaction(txn_id)
        assert txn.date == datetime(2024, 1, 15)
        assert txn.net_amount == Decimal("12.50")
        assert txn.currency == "USD"

    def test_negative_amounts_rejected(self, ledger_service, bank_account):
        with pytest.raises(ValidationError, match="must not be negative"):
            ledger_service.post_transaction(
                bank_account.id, AccountType.BANK, "USD", date(2024, 1, 1), incoming_amount="-1"
            )

    def test_undeclared_currency_is_accepted_with_warning(self, ledger_service, bank_account, caplog):
        with caplog.at_level(logging.WARNING, logger="balancebook"):
            ledger_service.post_transaction(
                bank_account.id, AccountType.BANK, "EUR", date(2024, 1, 1), incoming_amount="1"
            )

        assert "undeclared currency EUR" in caplog.text

    def test_delete_is_soft_and_not_repeatable(self, ledger_service, bank_account):
        txn_id = ledger_service.post_transaction(
            bank_account.id, AccountType.BANK, "USD", date(2024, 1, 1), outgoing_amount="3"
        )

        ledger_service.delete_transaction(txn_id)

        assert ledger_service.get_transaction(txn_id).is_deleted
        assert ledger_service.list_transactions(bank_account.id, AccountType.BANK) == []
        with pytest.raises(ConflictError, match="already deleted"):
            ledger_service.delete_transaction(txn_id)
        with pytest.raises(NotFoundError):
            ledger_service.delete_transaction(txn_id + 100)

    def test_list_transactions_filters(self, ledger_service, wallet):
        for moment, currency in [
            (datetime(2023, 12, 31, 9), "BTC"),
            (datetime(2024, 1, 10, 9), "ETH"),
            (datetime(2024, 1, 31, 9), "BTC"),
            (datetime(2024, 2, 1, 9), "BTC"),
        ]:
            ledger_service.post_transaction(
                wallet.id, AccountType.WALLET, currency, moment, incoming_amount="1"
            )

        january = ledger_service.list_transactions(
            wallet.id,
            AccountType.WALLET,
            currency="btc",
            date_from=date(2024, 1, 1),
            date_to=date(2024, 1, 31),
        )

        assert [t.date for t in january] == [datetime(2024, 1, 31, 9)]


class TestManualEntries:
    """Tests for manual cashflow entries."""

    def test_add_and_list(self, ledger_service, bank_account):
        entry_id = ledger_service.add_manual_entry(
            bank_account.id, AccountType.BANK, "USD", "2024-01", "outflow", "25", " Petty cash "
        )

        entries = ledger_service.list_manual_entries(bank_account.id, AccountType.BANK)
        assert [e.id for e in entries] == [entry_id]
        assert entries[0].type is CashflowType.OUTFLOW
        assert entries[0].description == "Petty cash"

    @pytest.mark.parametrize(
        "period, amount, description",
        [("2024-1", "5", "x"), ("2024-01", "0", "x"), ("2024-01", "-5", "x"), ("2024-01", "5", "  ")],
    )
    def test_invalid_entries(self, ledger_service, bank_account, period, amount, description):
        with pytest.raises(ValidationError):
            ledger_service.add_manual_entry(
                bank_account.id, AccountType.BANK, "USD", period, CashflowType.INFLOW, amount, description
            )

    def test_delete(self, ledger_service, bank_account):
        entry_id = ledger_service.add_manual_entry(
            bank_account.id, AccountType.BANK, "USD", "2024-01", CashflowType.INFLOW, "5", "x"
        )

        ledger_service.delete_manual_entry(entry_id)

        assert ledger_service.list_manual_entries(bank_account.id, AccountType.BANK) == []
        with pytest.raises(NotFoundError):
            ledger_service.delete_manual_entry(entry_id)


def test_error_taxonomy_is_value_error_compatible():
    from balancebook.domain.errors import DataInconsistencyError, DomainError

    for error_type in (ValidationError, NotFoundError, ConflictError, DataInconsistencyError):
        assert issubclass(error_type, DomainError)
        assert issubclass(error_type, ValueError)
