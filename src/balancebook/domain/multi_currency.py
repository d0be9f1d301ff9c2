"""Multi-currency account expansion.

Wallets may hold several currencies at one address. Legacy rows only fill the
primary ``currency`` column; newer rows also carry a comma-delimited list of
extra currencies. Both shapes are normalized here into one logical
sub-account per currency.
"""

from typing import Iterable, Optional

from balancebook.database.base import Database
from balancebook.domain.entities import Account, AccountType, LogicalSubAccount


def parse_currency_list(raw: Optional[str | Iterable[str]]) -> tuple[str, ...]:
    """Parse a currency list into unique, upper-cased codes.

    Accepts a comma-delimited string (``"USDT, btc,,ETH"``), any iterable of
    codes, or None. Blank entries are dropped and the first occurrence of a
    code wins.
    """
    if raw is None:
        return ()
    parts = raw.split(",") if isinstance(raw, str) else list(raw)

    seen: dict[str, None] = {}
    for part in parts:
        code = (part or "").strip().upper()
        if code:
            seen.setdefault(code, None)
    return tuple(seen)


def account_currencies(account: Account) -> tuple[str, ...]:
    """Return the account's currencies, primary first, without duplicates."""
    extra = sorted(account.currencies) if account.account_type is AccountType.WALLET else []
    return parse_currency_list([account.currency, *extra])


class AccountExpander:
    """Expands accounts into (account, currency) logical sub-accounts."""

    def __init__(self, db: Database):
        """Initialize account expander.

        Args:
            db: Database instance used to check opening balance existence
        """
        self.db = db

    def expand_account(self, account: Account) -> list[LogicalSubAccount]:
        """Expand an account into one logical sub-account per currency.

        Pairs without an opening balance are flagged rather than created, so
        reports can tell an uninitialized balance from an intentional zero.

        Args:
            account: Account entity

        Returns:
            List of logical sub-accounts, primary currency first
        """
        return [
            LogicalSubAccount(
                account=account,
                currency=currency,
                has_opening_balance=self.db.find_opening_balance(
                    account.id, account.account_type, currency
                )
                is not None,
            )
            for currency in account_currencies(account)
        ]

    def expand_accounts(self, accounts: Iterable[Account]) -> list[LogicalSubAccount]:
        """Expand several accounts, keeping input order."""
        sub_accounts: list[LogicalSubAccount] = []
        for account in accounts:
            sub_accounts.extend(self.expand_account(account))
        return sub_accounts
