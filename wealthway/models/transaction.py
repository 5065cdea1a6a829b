"""
Core Data Models for WealthWay

These models define the schemas for everything the tracker keeps or derives:
1. Transactions (the only records we persist, besides one setting)
2. The fixed category vocabulary per transaction type
3. Date ranges and the aggregate views computed over them

DESIGN DECISION: Dates are typed `date` values everywhere inside the package.
They are only turned into `YYYY-MM-DD` strings at the storage and display
edges, so range checks never depend on how a string was built.
"""

import datetime
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS AND VOCABULARY
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow for a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Food",
    "Housing & Utilities",
    "Transportation",
    "Hobbies & Entertainment",
    "Daily Goods & Clothing",
    "Health & Medical",
    "Education & Self-Improvement",
    "Other",
)

INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Bonus",
    "Investment",
    "Windfall",
    "Side Job",
    "Other",
)

CATEGORIES: dict[TransactionType, tuple[str, ...]] = {
    TransactionType.EXPENSE: EXPENSE_CATEGORIES,
    TransactionType.INCOME: INCOME_CATEGORIES,
}


def categories_for(transaction_type: TransactionType) -> tuple[str, ...]:
    """Ordered category list for a type. Always ends with "Other"."""
    return CATEGORIES[TransactionType(transaction_type)]


# =============================================================================
# TRANSACTION
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense record.

    Amounts are whole numbers in the smallest currency unit. The category is
    expected to come from the vocabulary of `type`, but this is NOT enforced:
    the entry form clears the category when the type changes, and
    `category_matches_type` reports any record that slipped through.
    """

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque unique identifier, never reused"
    )
    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    amount: int = Field(
        ...,
        ge=0,
        description="Amount in the smallest currency unit"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category label"
    )
    memo: str = Field(
        default="",
        description="Free-text note, kept exactly as typed"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date of the transaction (no time component)"
    )

    @field_validator("category", mode="before")
    @classmethod
    def strip_category(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def category_matches_type(self) -> bool:
        return self.category in categories_for(self.type)

    def to_storage_dict(self) -> dict:
        """JSON-ready dict; the date becomes a zero-padded YYYY-MM-DD string."""
        return self.model_dump(mode="json")


# =============================================================================
# RANGES AND AGGREGATES
# =============================================================================

class DateRange(BaseModel):
    """
    Inclusive calendar-date interval.

    A range with start after end is representable on purpose: the user
    can pick one, and the views must show it as invalid.
    """
    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    @property
    def is_valid(self) -> bool:
        return self.start <= self.end

    @property
    def length_days(self) -> int:
        """Number of days covered (0 for an invalid range)."""
        if not self.is_valid:
            return 0
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def iso(self) -> tuple[str, str]:
        return self.start.isoformat(), self.end.isoformat()


class Totals(BaseModel):
    """Income, expense and balance over a set of transactions."""

    income: int = 0
    expense: int = 0

    @property
    def balance(self) -> int:
        return self.income - self.expense


class CategoryTotal(BaseModel):
    """Summed expense amount for one category."""

    category: str
    total: int = Field(ge=0)


class FilterResult(BaseModel):
    """
    Outcome of filtering by a date range.

    When `invalid_range` is set, `transactions` is always empty and the
    caller must display the invalid state instead of zeros.
    """

    transactions: list[Transaction] = Field(default_factory=list)
    invalid_range: bool = False

    @property
    def count(self) -> int:
        return len(self.transactions)


# =============================================================================
# PERSISTED STATE
# =============================================================================

CURRENT_SCHEMA_VERSION = 1
DEFAULT_CYCLE_START_DAY = 1


class PersistedState(BaseModel):
    """Everything that survives a restart."""

    transactions: list[Transaction] = Field(default_factory=list)
    cycle_start_day: int = Field(
        default=DEFAULT_CYCLE_START_DAY,
        ge=1,
        le=28,
        description="Day of month on which every billing cycle begins"
    )
    schema_version: int = Field(
        default=CURRENT_SCHEMA_VERSION,
        ge=0,
    )


class TransactionForm(BaseModel):
    """
    State of the entry/edit form.

    `amount` is the raw text the user typed; it is parsed only on submit.
    `editing_id` is set while an existing transaction is being edited.
    """

    type: TransactionType = TransactionType.EXPENSE
    amount: str = ""
    category: str = ""
    memo: str = ""
    date: datetime.date = Field(default_factory=date.today)
    editing_id: Optional[str] = None

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    @property
    def category_options(self) -> tuple[str, ...]:
        return categories_for(self.type)

    def switch_type(self, transaction_type: TransactionType) -> None:
        """Change type and clear the category so it is re-selected from the new list."""
        self.type = TransactionType(transaction_type)
        self.category = ""
