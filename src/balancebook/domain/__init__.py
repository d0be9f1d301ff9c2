"""Domain layer for balancebook application."""

_SERVICES = {
    "AccountService": "balancebook.domain.account",
    "AccountExpander": "balancebook.domain.multi_currency",
    "BalanceService": "balancebook.domain.balance",
    "CashflowService": "balancebook.domain.cashflow",
    "InvoiceService": "balancebook.domain.invoice",
    "LedgerService": "balancebook.domain.ledger",
}

__all__ = list(_SERVICES)


# Services are imported lazily to avoid a circular import with the database
# layer, which imports domain entities.
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
