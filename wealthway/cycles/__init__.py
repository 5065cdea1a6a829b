"""Billing cycle calculations."""

from wealthway.cycles.calculator import (
    MAX_START_DAY,
    MIN_START_DAY,
    current_cycle,
    cycle_range,
    describe_cycle,
    next_cycle,
    previous_cycle,
    validate_start_day,
)

__all__ = [
    "MAX_START_DAY",
    "MIN_START_DAY",
    "current_cycle",
    "cycle_range",
    "describe_cycle",
    "next_cycle",
    "previous_cycle",
    "validate_start_day",
]
