"""
Filtering and Aggregation

DESIGN DECISION: Every derived view is a pure function of a list of
transactions. The dashboard filters once, then feeds the filtered list to
the totals, the category breakdown and the advisor summary.

GUARANTEES:
- Range filters are inclusive on both ends
- An inverted range never yields data, only an explicit invalid flag
- Nothing is re-sorted; input order is preserved
"""

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Union

from wealthway.models.transaction import (
    CategoryTotal,
    FilterResult,
    Totals,
    Transaction,
    TransactionType,
)


DateLike = Union[date, str]


def to_date(value: DateLike) -> date:
    """Accept a `date` or a `YYYY-MM-DD` string."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def filter_by_range(
    transactions: Iterable[Transaction],
    start: DateLike,
    end: DateLike,
) -> FilterResult:
    """
    Keep transactions with start <= date <= end.

    If start is after end the result is empty and flagged; the caller shows
    an "invalid range" state instead of stale or zero data.
    """
    start_date = to_date(start)
    end_date = to_date(end)

    if start_date > end_date:
        return FilterResult(transactions=[], invalid_range=True)

    return FilterResult(
        transactions=[tx for tx in transactions if start_date <= tx.date <= end_date],
        invalid_range=False,
    )


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum income and expense; balance is derived."""
    income = 0
    expense = 0
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            income += tx.amount
        else:
            expense += tx.amount
    return Totals(income=income, expense=expense)


def breakdown_by_category(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """
    Sum expense amounts per category.

    Groups come out in order of first occurrence. Income is ignored.
    """
    groups: dict[str, int] = {}
    for tx in transactions:
        if tx.type != TransactionType.EXPENSE:
            continue
        groups[tx.category] = groups.get(tx.category, 0) + tx.amount

    return [CategoryTotal(category=key, total=total) for key, total in groups.items()]


def summarize_for_advice(transactions: Sequence[Transaction]) -> dict[str, int]:
    """
    Collapse transactions into "<type>-<category>" totals.

    This is the only view of the data the advisory service ever sees.
    """
    summary: dict[str, int] = {}
    for tx in transactions:
        key = f"{tx.type.value}-{tx.category}"
        summary[key] = summary.get(key, 0) + tx.amount
    return summary
