"""Wealth module for Life OS.

Net worth, accounts, investments, cashflow and FIRE tracking.
"""

from .models import (
    Account,
    AccountType,
    AssetType,
    Company,
    DailySnapshot,
    Position,
    RecurringTransaction,
    TransactionFrequency,
    TransactionType,
    UserPreferences,
)
from .routers import router

__all__ = [
    # Models
    "Account",
    "DailySnapshot",
    "Position",
    "Company",
    "RecurringTransaction",
    "UserPreferences",
    # Enums
    "AccountType",
    "AssetType",
    "TransactionFrequency",
    "TransactionType",
    # Router
    "router",
]
