"""
Dashboard Charts

Plotly figures for the two dashboard visualizations:
1. Expense breakdown by category (donut)
2. Income vs expense for the selected range (bar)

Both take already-aggregated values; no filtering happens here.
"""

from collections.abc import Sequence

import plotly.graph_objects as go

from wealthway.formatting import format_currency
from wealthway.models.transaction import CategoryTotal, Totals


CHART_COLORS = [
    "#6366f1", "#10b981", "#f59e0b", "#ef4444",
    "#8b5cf6", "#ec4899", "#06b6d4", "#71717a",
]
INCOME_COLOR = "#10b981"
EXPENSE_COLOR = "#ef4444"


def category_donut(breakdown: Sequence[CategoryTotal], currency_symbol: str = "¥") -> go.Figure:
    """Donut chart of expense totals, colors cycling through CHART_COLORS."""
    labels = [item.category for item in breakdown]
    values = [item.total for item in breakdown]
    colors = [CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(breakdown))]

    fig = go.Figure(
        go.Pie(
            labels=labels,
            values=values,
            hole=0.6,
            marker={"colors": colors},
            sort=False,
            customdata=[format_currency(v, currency_symbol) for v in values],
            hovertemplate="%{label}: %{customdata}<extra></extra>",
        )
    )
    fig.update_layout(margin={"l": 10, "r": 10, "t": 10, "b": 10}, showlegend=True)
    return fig


def income_expense_bar(totals: Totals, currency_symbol: str = "¥") -> go.Figure:
    """Side-by-side income and expense bars for the selected range."""
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            name="Income",
            x=["Total"],
            y=[totals.income],
            marker_color=INCOME_COLOR,
            hovertemplate=f"Income: {format_currency(totals.income, currency_symbol)}<extra></extra>",
        )
    )
    fig.add_trace(
        go.Bar(
            name="Expense",
            x=["Total"],
            y=[totals.expense],
            marker_color=EXPENSE_COLOR,
            hovertemplate=f"Expense: {format_currency(totals.expense, currency_symbol)}<extra></extra>",
        )
    )
    fig.update_layout(
        barmode="group",
        margin={"l": 10, "r": 10, "t": 10, "b": 10},
        xaxis={"visible": False},
        yaxis={"tickprefix": currency_symbol, "separatethousands": True},
    )
    return fig
