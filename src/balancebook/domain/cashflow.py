"""Cashflow aggregation over accounts, currencies and date ranges.

Two streams are kept apart for every (account, currency) row:

- automatic: incoming/outgoing amounts of active ledger transactions dated
  inside the range
- manual: user-entered monthly inflows/outflows whose period month lies
  within the months the range touches

Grouping only reshapes the flat rows; totals are always computed from the
flat rows and keyed by currency, since amounts are never converted.
"""

import logging
from collections import defaultdict
from typing import Iterable, Optional

from balancebook.cache import Cache, NullCache
from balancebook.cache.keys import cashflow_key, period_breakdown_key
from balancebook.database.base import Database
from balancebook.domain.entities import (
    Account,
    AccountCashflow,
    AccountType,
    CashflowFigures,
    CashflowGroup,
    CashflowGroupBy,
    CashflowSummary,
    CashflowType,
    DateRange,
    FlowTotals,
    LedgerTransaction,
    LogicalSubAccount,
    ManualCashflowEntry,
    ZERO,
)
from balancebook.domain.errors import NotFoundError, company_not_found, undeclared_currency
from balancebook.domain.multi_currency import account_currencies
from balancebook.utils.date_parser import (
    end_of_day,
    period_bounds,
    period_of,
    start_of_day,
    validate_date_range,
)

logger = logging.getLogger(__name__)

ALL_ACCOUNTS_GROUP = "All accounts"


class _FlowAccumulator:
    """Mutable running sums for one currency."""

    def __init__(self):
        self.auto_in = ZERO
        self.auto_out = ZERO
        self.manual_in = ZERO
        self.manual_out = ZERO

    def add_transaction(self, transaction: LedgerTransaction) -> None:
        self.auto_in += transaction.incoming_amount
        self.auto_out += transaction.outgoing_amount

    def add_manual(self, entry: ManualCashflowEntry) -> None:
        if entry.type is CashflowType.INFLOW:
            self.manual_in += entry.amount
        else:
            self.manual_out += entry.amount

    def figures(self) -> CashflowFigures:
        return CashflowFigures(
            automatic=FlowTotals(self.auto_in, self.auto_out),
            manual=FlowTotals(self.manual_in, self.manual_out),
        )


def sum_by_currency(rows: Iterable[AccountCashflow]) -> dict[str, CashflowFigures]:
    """Sum row figures per currency, ordered by currency code."""
    totals: dict[str, CashflowFigures] = {}
    for row in rows:
        totals[row.currency] = totals.get(row.currency, CashflowFigures()) + row.figures
    return dict(sorted(totals.items()))


def group_rows(
    rows: Iterable[AccountCashflow], group_by: CashflowGroupBy
) -> tuple[CashflowGroup, ...]:
    """Reshape sorted rows into groups ordered by name.

    Rows keep their relative order inside each group.
    """
    buckets: dict[str, list[AccountCashflow]] = {}
    names: dict[str, str] = {}
    for row in rows:
        account = row.sub_account.account
        if group_by is CashflowGroupBy.ACCOUNT:
            key, name = f"{account.account_type.value}:{account.id}", account.display_name
        elif group_by is CashflowGroupBy.COMPANY:
            key, name = f"company:{account.company_id}", row.company_name
        elif group_by is CashflowGroupBy.CURRENCY:
            key, name = row.currency, row.currency
        else:
            key, name = "all", ALL_ACCOUNTS_GROUP
        buckets.setdefault(key, []).append(row)
        names[key] = name

    return tuple(
        CashflowGroup(
            key=key,
            name=names[key],
            rows=tuple(buckets[key]),
            totals=sum_by_currency(buckets[key]),
        )
        for key in sorted(buckets, key=lambda k: (names[k].lower(), k))
    )


class CashflowService:
    """Service for inflow/outflow summaries."""

    def __init__(self, db: Database, cache: Optional[Cache] = None):
        """Initialize cashflow service.

        Args:
            db: Database instance
            cache: Report cache (optional)
        """
        self.db = db
        self.cache = cache if cache is not None else NullCache()

    def _load_records(
        self, account: Account, date_range: DateRange
    ) -> tuple[list[LedgerTransaction], list[ManualCashflowEntry]]:
        period_from, period_to = period_bounds(date_range.start, date_range.end)
        transactions = self.db.find_transactions(
            account.id,
            account.account_type,
            date_from=start_of_day(date_range.start) if date_range.start is not None else None,
            date_to=end_of_day(date_range.end) if date_range.end is not None else None,
        )
        entries = self.db.find_manual_entries(
            account.id, account.account_type, period_from=period_from, period_to=period_to
        )
        return transactions, entries

    def _account_rows(
        self, account: Account, company_name: str, date_range: DateRange
    ) -> list[AccountCashflow]:
        transactions, entries = self._load_records(account, date_range)

        declared = account_currencies(account)
        sums: dict[str, _FlowAccumulator] = {currency: _FlowAccumulator() for currency in declared}
        for transaction in transactions:
            sums.setdefault(transaction.currency, _FlowAccumulator()).add_transaction(transaction)
        for entry in entries:
            sums.setdefault(entry.currency, _FlowAccumulator()).add_manual(entry)

        rows = []
        for currency, accumulator in sums.items():
            is_declared = currency in declared
            if not is_declared:
                logger.warning(
                    undeclared_currency(account.account_type.value, account.id, currency)
                )
            sub_account = LogicalSubAccount(
                account=account,
                currency=currency,
                has_opening_balance=self.db.find_opening_balance(
                    account.id, account.account_type, currency
                )
                is not None,
                is_declared=is_declared,
            )
            rows.append(
                AccountCashflow(
                    sub_account=sub_account,
                    company_name=company_name,
                    figures=accumulator.figures(),
                )
            )
        return rows

    def _company_names(self, accounts: Iterable[Account]) -> dict[int, str]:
        names = {}
        for company_id in {a.company_id for a in accounts}:
            company = self.db.get_company(company_id)
            names[company_id] = company.trading_name if company is not None else f"Company {company_id}"
        return names

    def aggregate_cashflow(
        self,
        accounts: Iterable[Account],
        date_range: DateRange = DateRange(),
        group_by: CashflowGroupBy = CashflowGroupBy.NONE,
        company_id: Optional[int] = None,
    ) -> CashflowSummary:
        """Summarize inflows and outflows of accounts over a date range.

        Every currency an account declares gets a row, with zero figures
        when there are no records. Records in undeclared currencies get an
        extra row flagged ``is_declared=False``.

        Args:
            accounts: Accounts to include
            date_range: Inclusive range; a bare end date covers the whole day
            group_by: Grouping mode for the returned groups
            company_id: Scope used for the cache key (None for ad-hoc sets)

        Returns:
            CashflowSummary with groups and per-currency totals

        Raises:
            ValidationError: If the range ends before it starts
        """
        validate_date_range(date_range.start, date_range.end)
        group_by = CashflowGroupBy(group_by)
        accounts = list(accounts)

        key = cashflow_key(company_id, accounts, date_range, group_by)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached
        logger.debug("Cache miss for %s", key)

        company_names = self._company_names(accounts)
        rows: list[AccountCashflow] = []
        for account in accounts:
            rows.extend(self._account_rows(account, company_names[account.company_id], date_range))
        rows.sort(key=lambda row: row.sub_account.sort_key())

        summary = CashflowSummary(
            group_by=group_by,
            date_range=date_range,
            groups=group_rows(rows, group_by),
            totals=sum_by_currency(rows),
        )
        self.cache.set(key, summary)
        return summary

    def aggregate_company_cashflow(
        self,
        company_id: Optional[int] = None,
        date_range: DateRange = DateRange(),
        group_by: CashflowGroupBy = CashflowGroupBy.NONE,
        account_type: Optional[AccountType] = None,
    ) -> CashflowSummary:
        """Summarize the active accounts of one company, or of all companies.

        Raises:
            NotFoundError: If ``company_id`` does not exist
        """
        if company_id is not None and self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        accounts = self.db.list_accounts(
            company_id=company_id, account_type=account_type, active_only=True
        )
        return self.aggregate_cashflow(accounts, date_range, group_by, company_id=company_id)

    def period_breakdown(
        self,
        accounts: Iterable[Account],
        date_range: DateRange = DateRange(),
        company_id: Optional[int] = None,
    ) -> dict[str, dict[str, CashflowFigures]]:
        """Roll cashflow up by "YYYY-MM" period and currency.

        Returns:
            Mapping of period to mapping of currency to figures, both sorted
        """
        validate_date_range(date_range.start, date_range.end)
        accounts = list(accounts)
        key = period_breakdown_key(company_id, accounts, date_range)
        cached = self.cache.get(key)
        if cached is None:
            cached = self._period_breakdown(accounts, date_range)
            self.cache.set(key, cached)
        return {period: dict(by_currency) for period, by_currency in cached.items()}

    def _period_breakdown(
        self, accounts: list[Account], date_range: DateRange
    ) -> dict[str, dict[str, CashflowFigures]]:
        sums: dict[str, dict[str, _FlowAccumulator]] = defaultdict(dict)
        for account in accounts:
            transactions, entries = self._load_records(account, date_range)
            for transaction in transactions:
                period = sums[period_of(transaction.date)]
                period.setdefault(transaction.currency, _FlowAccumulator()).add_transaction(transaction)
            for entry in entries:
                period = sums[entry.period]
                period.setdefault(entry.currency, _FlowAccumulator()).add_manual(entry)

        return {
            period: {currency: acc.figures() for currency, acc in sorted(by_currency.items())}
            for period, by_currency in sorted(sums.items())
        }
