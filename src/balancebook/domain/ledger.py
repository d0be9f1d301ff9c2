"""Ledger write service: opening balances, transactions and manual entries."""

import logging
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from balancebook.cache import Cache, CacheInvalidator, NullCache
from balancebook.database.base import Database
from balancebook.domain.entities import (
    Account,
    AccountType,
    CashflowType,
    LedgerTransaction,
    ManualCashflowEntry,
    OpeningBalance,
    ZERO,
)
from balancebook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
    undeclared_currency,
)
from balancebook.domain.multi_currency import account_currencies
from balancebook.utils.amount_parser import parse_currency_code, parse_period, to_decimal
from balancebook.utils.date_parser import end_of_day, start_of_day

logger = logging.getLogger(__name__)


class LedgerService:
    """Service for recording ledger data.

    Transactions are append-only and removed by soft delete; opening
    balances are replaced by upsert. Every write invalidates the cached
    reports of the affected account.
    """

    def __init__(self, db: Database, cache: Optional[Cache] = None):
        """Initialize ledger service.

        Args:
            db: Database instance
            cache: Report cache to invalidate on changes (optional)
        """
        self.db = db
        self.invalidator = CacheInvalidator(cache if cache is not None else NullCache())

    def _require_account(self, account_id: int, account_type: AccountType) -> Account:
        account = self.db.get_account(account_id, account_type)
        if account is None:
            raise NotFoundError(account_not_found(account_type.value, account_id))
        return account

    def _check_declared(self, account: Account, currency: str) -> None:
        if currency not in account_currencies(account):
            logger.warning(undeclared_currency(account.account_type.value, account.id, currency))

    def _invalidate(self, account: Account) -> None:
        self.invalidator.invalidate_account(account.account_type, account.id, account.company_id)

    # Opening balances
    def set_opening_balance(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        amount: Decimal | int | str,
        notes: Optional[str] = None,
    ) -> int:
        """Create or replace the opening balance of an account/currency pair.

        Negative amounts are allowed (overdrafts, credit lines).

        Returns:
            Opening balance ID
        """
        currency = parse_currency_code(currency)
        amount = to_decimal(amount)
        account = self._require_account(account_id, account_type)
        self._check_declared(account, currency)

        balance_id = self.db.upsert_opening_balance(
            account_id, account_type, currency, amount, notes=notes
        )
        self._invalidate(account)
        return balance_id

    def get_opening_balance(
        self, account_id: int, account_type: AccountType, currency: str
    ) -> Optional[OpeningBalance]:
        """Get the opening balance of an account/currency pair, if set."""
        return self.db.find_opening_balance(account_id, account_type, parse_currency_code(currency))

    # Transactions
    def post_transaction(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        date: date | datetime,
        incoming_amount: Decimal | int | str = ZERO,
        outgoing_amount: Decimal | int | str = ZERO,
        description: Optional[str] = None,
        linked_entry_id: Optional[int] = None,
    ) -> int:
        """Post a ledger transaction.

        Args:
            account_id: Account ID
            account_type: Account type
            currency: Currency code of the movement
            date: Posting date; a bare date is stored at midnight
            incoming_amount: Amount received (>= 0)
            outgoing_amount: Amount paid out (>= 0)
            description: Optional description
            linked_entry_id: Optional bookkeeping entry this movement settles

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the currency is malformed or an amount is negative
            NotFoundError: If the account does not exist
        """
        currency = parse_currency_code(currency)
        incoming = to_decimal(incoming_amount, "incoming amount")
        outgoing = to_decimal(outgoing_amount, "outgoing amount")
        if incoming < 0 or outgoing < 0:
            raise ValidationError("Incoming and outgoing amounts must not be negative")

        account = self._require_account(account_id, account_type)
        self._check_declared(account, currency)

        transaction_id = self.db.create_transaction(
            account_id=account_id,
            account_type=account_type,
            currency=currency,
            date=start_of_day(date),
            incoming_amount=incoming,
            outgoing_amount=outgoing,
            description=description,
            linked_entry_id=linked_entry_id,
        )
        self._invalidate(account)
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[LedgerTransaction]:
        """Get transaction by ID (soft-deleted ones included)."""
        return self.db.get_transaction(transaction_id)

    def delete_transaction(self, transaction_id: int) -> None:
        """Soft-delete a transaction.

        Raises:
            NotFoundError: If the transaction does not exist
            ConflictError: If it is already deleted
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if transaction.is_deleted:
            raise ConflictError(f"Transaction {transaction_id} is already deleted")

        self.db.soft_delete_transaction(transaction_id)
        account = self.db.get_account(transaction.account_id, transaction.account_type)
        self.invalidator.invalidate_account(
            transaction.account_type,
            transaction.account_id,
            account.company_id if account is not None else None,
        )

    def list_transactions(
        self,
        account_id: int,
        account_type: AccountType,
        currency: Optional[str] = None,
        date_from: Optional[date | datetime] = None,
        date_to: Optional[date | datetime] = None,
    ) -> list[LedgerTransaction]:
        """List active transactions of an account, oldest first."""
        self._require_account(account_id, account_type)
        return self.db.find_transactions(
            account_id,
            account_type,
            currency=parse_currency_code(currency) if currency else None,
            date_from=start_of_day(date_from) if date_from is not None else None,
            date_to=end_of_day(date_to) if date_to is not None else None,
        )

    # Manual cashflow entries
    def add_manual_entry(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        period: str,
        type: CashflowType,
        amount: Decimal | int | str,
        description: str,
        notes: Optional[str] = None,
    ) -> int:
        """Record a manual inflow or outflow for a month.

        Raises:
            ValidationError: If the period is not YYYY-MM, the amount is not
                positive or the description is blank
            NotFoundError: If the account does not exist
        """
        currency = parse_currency_code(currency)
        period = parse_period(period)
        amount = to_decimal(amount)
        if amount <= 0:
            raise ValidationError("Manual cashflow amount must be greater than zero")
        description = (description or "").strip()
        if not description:
            raise ValidationError("Manual cashflow description is required")

        account = self._require_account(account_id, account_type)
        self._check_declared(account, currency)

        entry_id = self.db.create_manual_entry(
            account_id=account_id,
            account_type=account_type,
            currency=currency,
            period=period,
            type=CashflowType(type),
            amount=amount,
            description=description,
            notes=notes,
        )
        self._invalidate(account)
        return entry_id

    def delete_manual_entry(self, entry_id: int) -> None:
        """Delete a manual cashflow entry."""
        entry = self.db.get_manual_entry(entry_id)
        if entry is None:
            raise NotFoundError(f"Manual cashflow entry {entry_id} not found")
        self.db.delete_manual_entry(entry_id)
        account = self.db.get_account(entry.account_id, entry.account_type)
        self.invalidator.invalidate_account(
            entry.account_type,
            entry.account_id,
            account.company_id if account is not None else None,
        )

    def list_manual_entries(
        self,
        account_id: int,
        account_type: AccountType,
        period_from: Optional[str] = None,
        period_to: Optional[str] = None,
    ) -> list[ManualCashflowEntry]:
        """List manual entries of an account by period."""
        self._require_account(account_id, account_type)
        return self.db.find_manual_entries(
            account_id,
            account_type,
            period_from=parse_period(period_from) if period_from else None,
            period_to=parse_period(period_to) if period_to else None,
        )
