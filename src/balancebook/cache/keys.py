"""Cache key builders and invalidation.

Every cached report key encodes its scope so that a mutation can find the
keys it affects with a glob pattern:

    cashflow:company=7:accounts=|bank:1|wallet:3|:from=2024-01-01:to=open:group=none

Account references are wrapped in ``|`` so ``*|bank:1|*`` never matches
``bank:10``.
"""

import logging
from datetime import date, datetime
from typing import Iterable, Optional, Union

from balancebook.cache.base import Cache
from balancebook.domain.entities import Account, AccountType, CashflowGroupBy, DateRange

logger = logging.getLogger(__name__)

OPEN = "open"
ALL = "all"


def _scope(value: Optional[object]) -> str:
    if value is None:
        return ALL
    if isinstance(value, AccountType):
        return value.value
    return str(value)


def _bound(value: Optional[Union[date, datetime]]) -> str:
    return value.isoformat() if value is not None else OPEN


def account_ref(account_type: AccountType, account_id: int) -> str:
    """Return the ``type:id`` reference used inside keys."""
    return f"{account_type.value}:{account_id}"


def _account_list(accounts: Iterable[Account]) -> str:
    refs = sorted({account_ref(a.account_type, a.id) for a in accounts})
    return "|" + "|".join(refs) + "|" if refs else "||"


def cashflow_key(
    company_id: Optional[int],
    accounts: Iterable[Account],
    date_range: DateRange,
    group_by: CashflowGroupBy,
) -> str:
    """Key for a cashflow summary."""
    return (
        f"cashflow:company={_scope(company_id)}:accounts={_account_list(accounts)}"
        f":from={_bound(date_range.start)}:to={_bound(date_range.end)}"
        f":group={group_by.value}"
    )


def period_breakdown_key(
    company_id: Optional[int], accounts: Iterable[Account], date_range: DateRange
) -> str:
    """Key for a monthly cashflow breakdown."""
    return (
        f"periods:company={_scope(company_id)}:accounts={_account_list(accounts)}"
        f":from={_bound(date_range.start)}:to={_bound(date_range.end)}"
    )


def balances_key(
    company_id: Optional[int],
    account_type: Optional[AccountType],
    accounts: Iterable[Account],
    as_of: Optional[datetime],
) -> str:
    """Key for a multi-account balance report."""
    return (
        f"balances:company={_scope(company_id)}:type={_scope(account_type)}"
        f":accounts={_account_list(accounts)}:asof={_bound(as_of)}"
    )


def cogs_key(invoice_id: int, product_ids: Iterable[Optional[int]]) -> str:
    """Key for the COGS of one invoice."""
    refs = sorted({f"product:{pid}" for pid in product_ids if pid is not None})
    products = "|" + "|".join(refs) + "|" if refs else "||"
    return f"cogs:invoice={invoice_id}:products={products}"


class CacheInvalidator:
    """Removes cached reports affected by a mutation."""

    def __init__(self, cache: Cache):
        """Initialize cache invalidator.

        Args:
            cache: Cache instance shared with the reporting services
        """
        self.cache = cache

    def _invalidate(self, patterns: list[str], reason: str) -> int:
        removed = sum(self.cache.invalidate_pattern(p) for p in patterns)
        logger.info("Invalidated %d cache entries for %s", removed, reason)
        return removed

    def invalidate_account(
        self, account_type: AccountType, account_id: int, company_id: Optional[int] = None
    ) -> int:
        """Invalidate reports that include an account.

        Company-scoped and unscoped reports are dropped too, because a new or
        changed account can enter a report it was not part of before.
        """
        patterns = [f"*|{account_ref(account_type, account_id)}|*", f"*company={ALL}:*"]
        if company_id is not None:
            patterns.append(f"*company={company_id}:*")
        return self._invalidate(patterns, f"account {account_ref(account_type, account_id)}")

    def invalidate_company(self, company_id: int) -> int:
        """Invalidate every report scoped to a company or to all companies."""
        return self._invalidate(
            [f"*company={company_id}:*", f"*company={ALL}:*"], f"company {company_id}"
        )

    def invalidate_invoice(self, invoice_id: int) -> int:
        """Invalidate the cached COGS of an invoice."""
        return self._invalidate([f"cogs:invoice={invoice_id}:*"], f"invoice {invoice_id}")

    def invalidate_product(self, product_id: int) -> int:
        """Invalidate cached COGS of every invoice that uses a product."""
        return self._invalidate([f"cogs:*|product:{product_id}|*"], f"product {product_id}")
