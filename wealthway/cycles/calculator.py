"""
Billing Cycle Calculator

A cycle is the interval that starts on day `start_day` of one month and ends
the day before `start_day` in the following month. With `start_day == 1` a
cycle is exactly a calendar month.

DESIGN DECISION: `start_day` is limited to 1-28. Every month has those days,
so a cycle start never needs clamping and every cycle is exactly as long as
its start month.

Everything here is DETERMINISTIC and pure. `today` is always a parameter so
tests never depend on the wall clock.
"""

from datetime import date, timedelta
from typing import Optional

from wealthway.models.transaction import DateRange

MIN_START_DAY = 1
MAX_START_DAY = 28

ONE_DAY = timedelta(days=1)


def validate_start_day(start_day: int) -> int:
    """Return `start_day` unchanged, or raise ValueError outside 1-28."""
    if isinstance(start_day, bool) or not isinstance(start_day, int):
        raise ValueError(f"Cycle start day must be an integer, got {start_day!r}")
    if not MIN_START_DAY <= start_day <= MAX_START_DAY:
        raise ValueError(
            f"Cycle start day must be between {MIN_START_DAY} and {MAX_START_DAY}, got {start_day}"
        )
    return start_day


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` months, rolling the year as needed."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def cycle_range(anchor: date, start_day: int) -> DateRange:
    """
    Get the cycle containing `anchor`.

    1. If anchor.day >= start_day the cycle starts this month, else last month.
    2. The cycle ends the day before start_day in the month after the start.
       For start_day == 1 that is "day 0" of the next month, i.e. the last day
       of the start month, which is what stepping back from the 1st gives.

    Examples (start_day=16):
        2024-03-10 -> 2024-02-16 .. 2024-03-15
        2024-03-20 -> 2024-03-16 .. 2024-04-15
    """
    validate_start_day(start_day)

    if anchor.day >= start_day:
        start_year, start_month = anchor.year, anchor.month
    else:
        start_year, start_month = _shift_month(anchor.year, anchor.month, -1)

    start = date(start_year, start_month, start_day)

    end_year, end_month = _shift_month(start_year, start_month, 1)
    end = date(end_year, end_month, start_day) - ONE_DAY

    return DateRange(start=start, end=end)


def previous_cycle(current_start: date, start_day: int) -> DateRange:
    """
    Get the cycle immediately before the one starting at `current_start`.

    The day before `current_start` is used as the new anchor, so the two
    cycles are adjacent whatever the month lengths.
    """
    return cycle_range(current_start - ONE_DAY, start_day)


def next_cycle(current_end: date, start_day: int) -> DateRange:
    """Get the cycle immediately after the one ending at `current_end`."""
    return cycle_range(current_end + ONE_DAY, start_day)


def current_cycle(start_day: int, today: Optional[date] = None) -> DateRange:
    """The cycle containing today (the "this cycle" preset)."""
    return cycle_range(today or date.today(), start_day)


def _ordinal(n: int) -> str:
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def describe_cycle(start_day: int) -> str:
    """
    Human-readable description of the cycle for the settings hint.

    >>> describe_cycle(1)
    '1st to end of month'
    >>> describe_cycle(16)
    '16th to 15th of the following month'
    """
    validate_start_day(start_day)
    if start_day == 1:
        return "1st to end of month"
    return f"{_ordinal(start_day)} to {_ordinal(start_day - 1)} of the following month"
