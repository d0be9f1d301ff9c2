"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input rejected before any aggregation runs."""


class NotFoundError(DomainError):
    """Referenced account, invoice or record does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DataInconsistencyError(DomainError):
    """Stored records disagree with each other.

    These are reported through logging and the offending record is still
    included in sums, so this type is mostly used to describe the condition.
    """


def account_not_found(account_type: str, account_id: int) -> str:
    """Return message for missing account."""
    return f"{account_type.capitalize()} account {account_id} not found"


def company_not_found(company_id: int) -> str:
    """Return message for missing company."""
    return f"Company {company_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing ledger transaction."""
    return f"Transaction {transaction_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def product_not_found(product_id: int) -> str:
    """Return message for missing product."""
    return f"Product {product_id} not found"


def undeclared_currency(account_type: str, account_id: int, currency: str) -> str:
    """Return message for a record in a currency the account never declared."""
    return (
        f"{account_type.capitalize()} account {account_id} has records in "
        f"undeclared currency {currency}"
    )


def duplicate_company_name(name: str) -> str:
    """Return message for duplicate company trading name."""
    return f"Company with name '{name}' already exists"
