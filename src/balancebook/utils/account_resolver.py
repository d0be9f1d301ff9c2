"""Utility for resolving account references to accounts."""

from balancebook.domain.account import AccountService
from balancebook.domain.entities import Account, AccountType
from balancebook.domain.errors import NotFoundError, ValidationError


def resolve_account(account_service: AccountService, account: str | int) -> Account:
    """Resolve an account reference to an Account.

    Accepted references:
    - "bank:3" or "wallet:5" (type and ID)
    - 3 or "3" (ID; IDs are unique across account types)
    - "Operating" (account name, must be unambiguous)

    Args:
        account_service: AccountService instance
        account: Account reference

    Returns:
        Account entity

    Raises:
        NotFoundError: If no account matches
        ValidationError: If the reference is malformed or ambiguous
    """
    if isinstance(account, int):
        return _resolve_by_id(account_service, account)

    reference = account.strip()
    if ":" in reference:
        type_part, _, id_part = reference.partition(":")
        try:
            account_type = AccountType(type_part.strip().lower())
            account_id = int(id_part)
        except ValueError as e:
            raise ValidationError(
                f"Invalid account reference '{reference}': expected bank:<id> or wallet:<id>"
            ) from e
        return account_service.require_account(account_id, account_type)

    try:
        account_id = int(reference)
    except ValueError:
        pass
    else:
        return _resolve_by_id(account_service, account_id)

    matches = [acc for acc in account_service.list_accounts() if acc.name == reference]
    if not matches:
        raise NotFoundError(f"Account '{reference}' not found")
    if len(matches) > 1:
        refs = ", ".join(f"{acc.account_type.value}:{acc.id}" for acc in matches)
        raise ValidationError(f"Account name '{reference}' is ambiguous ({refs})")
    return matches[0]


def _resolve_by_id(account_service: AccountService, account_id: int) -> Account:
    for account_type in AccountType:
        account = account_service.get_account(account_id, account_type)
        if account is not None:
            return account
    raise NotFoundError(f"Account ID {account_id} not found")
