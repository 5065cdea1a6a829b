"""
WealthWay - Source Package

A small personal-finance tracker: record income and expenses, view them
per billing cycle, chart the totals and ask an AI for a tip.

DESIGN PRINCIPLES:
1. Cycle math and aggregation are pure functions
2. State is owned by one store object with an injected persistence port
3. Invalid ranges are shown, never silently "fixed"
4. The AI only sees summarized data and can never break the app
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "WealthWay Team"
