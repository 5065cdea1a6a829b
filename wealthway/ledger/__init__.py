"""Transaction store and aggregations."""

from wealthway.ledger.aggregation import (
    breakdown_by_category,
    compute_totals,
    filter_by_range,
    summarize_for_advice,
    to_date,
)
from wealthway.ledger.store import TransactionStore, parse_amount

__all__ = [
    "TransactionStore",
    "breakdown_by_category",
    "compute_totals",
    "filter_by_range",
    "parse_amount",
    "summarize_for_advice",
    "to_date",
]
