"""Point-in-time balance resolution.

The balance of an (account, currency) pair at ``as_of`` is its opening
balance plus the net amount of every active transaction in that currency
dated on or before ``as_of``. Other currencies are never mixed in.
"""

import logging
from typing import Iterable, Optional
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from balancebook.cache import Cache, NullCache
from balancebook.cache.keys import balances_key
from balancebook.database.base import Database
from balancebook.domain.entities import (
    Account,
    AccountBalance,
    AccountType,
    BalanceSummary,
    CurrencyBalanceTotals,
    LogicalSubAccount,
    ZERO,
)
from balancebook.domain.errors import (
    DomainError,
    NotFoundError,
    account_not_found,
    undeclared_currency,
)
from balancebook.domain.multi_currency import AccountExpander, account_currencies
from balancebook.utils.amount_parser import parse_currency_code
from balancebook.utils.date_parser import end_of_day

logger = logging.getLogger(__name__)

UNAVAILABLE = "balance unavailable"


def normalize_as_of(as_of: Optional[date | datetime]) -> Optional[datetime]:
    """Turn a bare date into the last instant of that day."""
    if as_of is None:
        return None
    return end_of_day(as_of)


class BalanceService:
    """Service for resolving account balances."""

    def __init__(self, db: Database, cache: Optional[Cache] = None):
        """Initialize balance service.

        Args:
            db: Database instance
            cache: Cache for multi-account balance reports (optional)
        """
        self.db = db
        self.cache = cache if cache is not None else NullCache()
        self.expander = AccountExpander(db)

    def resolve_balance(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        as_of: Optional[date | datetime] = None,
    ) -> Decimal:
        """Resolve the balance of an account in one currency.

        Args:
            account_id: Account ID
            account_type: Account type
            currency: Currency code
            as_of: Inclusive upper bound; a bare date covers the whole day,
                None means all transactions

        Returns:
            Opening balance plus net of active transactions up to ``as_of``

        Raises:
            ValidationError: If the currency code is malformed
            NotFoundError: If the account does not exist
        """
        return self.get_account_balance(account_id, account_type, currency, as_of).final_balance

    def get_account_balance(
        self,
        account_id: int,
        account_type: AccountType,
        currency: str,
        as_of: Optional[date | datetime] = None,
    ) -> AccountBalance:
        """Resolve a balance with its opening/incoming/outgoing breakdown."""
        currency = parse_currency_code(currency)
        account = self.db.get_account(account_id, account_type)
        if account is None:
            raise NotFoundError(account_not_found(account_type.value, account_id))

        is_declared = currency in account_currencies(account)
        if not is_declared:
            logger.warning(undeclared_currency(account_type.value, account_id, currency))

        sub_account = LogicalSubAccount(
            account=account,
            currency=currency,
            has_opening_balance=self.db.find_opening_balance(account_id, account_type, currency)
            is not None,
            is_declared=is_declared,
        )
        return self._compute(sub_account, normalize_as_of(as_of))

    def _compute(self, sub_account: LogicalSubAccount, as_of: Optional[datetime]) -> AccountBalance:
        account = sub_account.account
        opening = self.db.find_opening_balance(
            account.id, account.account_type, sub_account.currency
        )
        transactions = self.db.find_transactions(
            account.id, account.account_type, currency=sub_account.currency, date_to=as_of
        )

        opening_amount = opening.amount if opening is not None else ZERO
        incoming = sum((t.incoming_amount for t in transactions), ZERO)
        outgoing = sum((t.outgoing_amount for t in transactions), ZERO)
        net = sum((t.net_amount for t in transactions), ZERO)

        return AccountBalance(
            sub_account=sub_account,
            as_of=as_of,
            opening_balance=opening_amount,
            transaction_balance=net,
            incoming_amount=incoming,
            outgoing_amount=outgoing,
            final_balance=opening_amount + net,
            last_transaction_date=max((t.date for t in transactions), default=None),
        )

    def _sub_accounts(self, accounts: Iterable[Account]) -> list[LogicalSubAccount]:
        """Expand accounts, adding flagged rows for undeclared recorded currencies."""
        sub_accounts: list[LogicalSubAccount] = []
        for account in accounts:
            declared = self.expander.expand_account(account)
            sub_accounts.extend(declared)
            known = {s.currency for s in declared}
            for currency in self.db.find_recorded_currencies(account.id, account.account_type):
                if currency in known:
                    continue
                logger.warning(undeclared_currency(account.account_type.value, account.id, currency))
                sub_accounts.append(
                    LogicalSubAccount(
                        account=account,
                        currency=currency,
                        has_opening_balance=self.db.find_opening_balance(
                            account.id, account.account_type, currency
                        )
                        is not None,
                        is_declared=False,
                    )
                )
        return sub_accounts

    def list_account_balances(
        self,
        company_id: Optional[int] = None,
        account_type: Optional[AccountType] = None,
        as_of: Optional[date | datetime] = None,
    ) -> tuple[AccountBalance, ...]:
        """Resolve balances of every currency of every active account.

        A sub-account whose balance cannot be resolved is reported with
        ``available=False`` instead of failing the whole report.

        Args:
            company_id: Optional company filter
            account_type: Optional account type filter
            as_of: Inclusive upper bound (see ``resolve_balance``)

        Returns:
            Balances ordered bank accounts first, then by name and currency
        """
        as_of_dt = normalize_as_of(as_of)
        accounts = self.db.list_accounts(
            company_id=company_id, account_type=account_type, active_only=True
        )
        key = balances_key(company_id, account_type, accounts, as_of_dt)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached
        logger.debug("Cache miss for %s", key)

        balances = []
        for sub_account in sorted(self._sub_accounts(accounts), key=LogicalSubAccount.sort_key):
            try:
                balances.append(self._compute(sub_account, as_of_dt))
            except (DomainError, SQLAlchemyError) as e:
                logger.warning("Balance of %s unavailable: %s", sub_account.key, e)
                balances.append(
                    AccountBalance(
                        sub_account=sub_account,
                        as_of=as_of_dt,
                        opening_balance=None,
                        transaction_balance=None,
                        incoming_amount=None,
                        outgoing_amount=None,
                        final_balance=None,
                        available=False,
                        error=f"{UNAVAILABLE}: {e}",
                    )
                )

        result = tuple(balances)
        self.cache.set(key, result)
        return result


def summarize_balances(balances: Iterable[AccountBalance]) -> BalanceSummary:
    """Summarize a balance report per currency.

    Non-negative balances count as assets, negative ones as liabilities (by
    absolute value). Unavailable balances are counted but not summed.
    """
    balances = list(balances)
    accounts = {b.sub_account.account.key for b in balances}
    totals: dict[str, CurrencyBalanceTotals] = {}

    for balance in balances:
        if not balance.available or balance.final_balance is None:
            continue
        current = totals.get(balance.currency, CurrencyBalanceTotals())
        if balance.final_balance >= 0:
            current = CurrencyBalanceTotals(current.assets + balance.final_balance, current.liabilities)
        else:
            current = CurrencyBalanceTotals(current.assets, current.liabilities - balance.final_balance)
        totals[balance.currency] = current

    return BalanceSummary(
        account_count=len(accounts),
        bank_account_count=sum(1 for t, _ in accounts if t is AccountType.BANK),
        wallet_count=sum(1 for t, _ in accounts if t is AccountType.WALLET),
        unavailable_count=sum(1 for b in balances if not b.available),
        by_currency=dict(sorted(totals.items())),
    )
