"""Database layer for balancebook application."""

from balancebook.database.base import Database

__all__ = ["Database", "create_sqlite_database"]


# Import factories lazily; the mappers depend on domain modules that import
# Database from this package.
def __getattr__(name):
    if name == "create_sqlite_database":
        from balancebook.database.factories import create_sqlite_database
        return create_sqlite_database
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
