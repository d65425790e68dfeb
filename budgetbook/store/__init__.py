"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from budgetbook.store.queries import LedgerSnapshot, StaleLedgerError, load_ledger, replace_ledger
from budgetbook.store.schema import database_exists, get_db_path, init_database
from budgetbook.store.users import AuthenticationError, UserExistsError, authenticate_user, register_user

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Ledgers
    "LedgerSnapshot",
    "StaleLedgerError",
    "load_ledger",
    "replace_ledger",
    # Users
    "AuthenticationError",
    "UserExistsError",
    "authenticate_user",
    "register_user",
]
