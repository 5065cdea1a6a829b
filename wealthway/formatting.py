"""Display helpers for amounts and dates."""

import html
import math
from datetime import date
from typing import Union

from wealthway.models.transaction import Transaction, TransactionType


def format_currency(value: Union[int, float], symbol: str = "¥") -> str:
    """Floor to a whole unit and group thousands: 1234567.8 -> '¥1,234,567'."""
    whole = math.floor(value)
    if whole < 0:
        return f"-{symbol}{abs(whole):,}"
    return f"{symbol}{whole:,}"


def format_signed_amount(tx: Transaction, symbol: str = "¥") -> str:
    """'+¥5,000' for income, '-¥1,200' for expense."""
    sign = "+" if tx.type == TransactionType.INCOME else "-"
    return f"{sign}{format_currency(tx.amount, symbol)}"


def format_date_display(value: Union[date, str]) -> str:
    """'2024-03-16' -> '2024/03/16'."""
    if isinstance(value, date):
        value = value.isoformat()
    return value.replace("-", "/")


def format_transaction_line(tx: Transaction) -> str:
    """Secondary line of a list row: date, plus the memo when there is one."""
    line = format_date_display(tx.date)
    if tx.memo:
        line = f"{line} • {tx.memo}"
    return line


def advice_box_html(text: str) -> str:
    """The advice panel markup. Model output is escaped; it is never trusted as HTML."""
    return f'<div class="advice-box">{html.escape(text)}</div>'
