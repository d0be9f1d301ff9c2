"""Company and account domain service."""

from typing import Iterable, Optional
from balancebook.cache import Cache, CacheInvalidator, NullCache
from balancebook.database.base import Database
from balancebook.domain.entities import Account as AccountEntity, AccountType, Company
from balancebook.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    company_not_found,
    duplicate_company_name,
)
from balancebook.domain.multi_currency import parse_currency_list
from balancebook.utils.amount_parser import parse_currency_code


class AccountService:
    """Service for managing companies, bank accounts and wallets."""

    def __init__(self, db: Database, cache: Optional[Cache] = None):
        """Initialize account service.

        Args:
            db: Database instance
            cache: Report cache to invalidate on changes (optional)
        """
        self.db = db
        self.invalidator = CacheInvalidator(cache if cache is not None else NullCache())

    # Companies
    def create_company(self, trading_name: str) -> int:
        """Create a company.

        Args:
            trading_name: Unique trading name

        Returns:
            Company ID

        Raises:
            ValidationError: If the name is blank
            ConflictError: If a company with the same name exists
        """
        trading_name = (trading_name or "").strip()
        if not trading_name:
            raise ValidationError("Company trading name is required")
        if self.db.get_company_by_name(trading_name) is not None:
            raise ConflictError(duplicate_company_name(trading_name))

        company_id = self.db.create_company(trading_name)
        self.invalidator.invalidate_company(company_id)
        return company_id

    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        return self.db.get_company(company_id)

    def require_company(self, company_id: int) -> Company:
        """Get company by ID or raise NotFoundError."""
        company = self.db.get_company(company_id)
        if company is None:
            raise NotFoundError(company_not_found(company_id))
        return company

    def list_companies(self) -> list[Company]:
        """List all companies."""
        return self.db.list_companies()

    # Accounts
    def create_account(
        self,
        account_type: AccountType,
        company_id: int,
        name: str,
        currency: str,
        bank_name: Optional[str] = None,
        currencies: Iterable[str] | str | None = None,
    ) -> int:
        """Create a bank account or wallet.

        Args:
            account_type: BANK or WALLET
            company_id: Owning company ID
            name: Account name
            currency: Primary currency code
            bank_name: Bank name (bank accounts only)
            currencies: Extra currency codes (wallets only)

        Returns:
            Account ID

        Raises:
            NotFoundError: If the company does not exist
            ValidationError: If a currency code is malformed, the name is blank,
                or extra currencies are given for a bank account
        """
        self.require_company(company_id)
        name = (name or "").strip()
        if not name:
            raise ValidationError("Account name is required")
        currency = parse_currency_code(currency)

        extra = [parse_currency_code(code) for code in parse_currency_list(currencies)]
        if extra and account_type is not AccountType.WALLET:
            raise ValidationError("Only wallets can hold additional currencies")
        extra = [code for code in extra if code != currency]

        account_id = self.db.create_account(
            account_type=account_type,
            company_id=company_id,
            name=name,
            currency=currency,
            bank_name=bank_name.strip() if bank_name else None,
            currencies=extra,
        )
        self.invalidator.invalidate_account(account_type, account_id, company_id)
        return account_id

    def create_bank_account(
        self, company_id: int, name: str, currency: str, bank_name: Optional[str] = None
    ) -> int:
        """Create a single-currency bank account."""
        return self.create_account(AccountType.BANK, company_id, name, currency, bank_name=bank_name)

    def create_wallet(
        self,
        company_id: int,
        name: str,
        currency: str,
        currencies: Iterable[str] | str | None = None,
    ) -> int:
        """Create a wallet holding a primary and optional extra currencies."""
        return self.create_account(
            AccountType.WALLET, company_id, name, currency, currencies=currencies
        )

    def get_account(self, account_id: int, account_type: AccountType) -> Optional[AccountEntity]:
        """Get account by ID and type.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id, account_type)

    def require_account(self, account_id: int, account_type: AccountType) -> AccountEntity:
        """Get account by ID and type or raise NotFoundError."""
        account = self.db.get_account(account_id, account_type)
        if account is None:
            raise NotFoundError(account_not_found(account_type.value, account_id))
        return account

    def list_accounts(
        self,
        company_id: Optional[int] = None,
        account_type: Optional[AccountType] = None,
        active_only: bool = False,
    ) -> list[AccountEntity]:
        """List accounts with optional company, type and active filters."""
        return self.db.list_accounts(
            company_id=company_id, account_type=account_type, active_only=active_only
        )

    def set_account_active(
        self, account_id: int, account_type: AccountType, is_active: bool
    ) -> None:
        """Enable or soft-disable an account.

        Inactive accounts keep their history but drop out of company reports.
        """
        account = self.require_account(account_id, account_type)
        self.db.update_account_active(account_id, account_type, is_active)
        self.invalidator.invalidate_account(account_type, account_id, account.company_id)

    def deactivate_account(self, account_id: int, account_type: AccountType) -> None:
        """Soft-disable an account."""
        self.set_account_active(account_id, account_type, False)
