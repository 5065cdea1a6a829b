"""
Data Models Package

This package contains all Pydantic models used in WealthWay.
All data flowing through the system must conform to these schemas.
"""

from wealthway.models.transaction import (
    CATEGORIES,
    CURRENT_SCHEMA_VERSION,
    DEFAULT_CYCLE_START_DAY,
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    CategoryTotal,
    DateRange,
    FilterResult,
    PersistedState,
    Totals,
    Transaction,
    TransactionForm,
    TransactionType,
    categories_for,
)
from wealthway.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Transaction models
    "CATEGORIES",
    "CURRENT_SCHEMA_VERSION",
    "DEFAULT_CYCLE_START_DAY",
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "CategoryTotal",
    "DateRange",
    "FilterResult",
    "PersistedState",
    "Totals",
    "Transaction",
    "TransactionForm",
    "TransactionType",
    "categories_for",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
