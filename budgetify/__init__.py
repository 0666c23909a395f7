"""Top-level package for the Budgetify analytics core.

This file makes the directory a Python package and exposes
convenient names.  The primary modules are:

* ``summary`` – income/expense/balance/savings-rate summaries
* ``grouping`` – category and weekday breakdowns for charts
* ``investments`` – portfolio totals and the growth projection
* ``splits`` – split-expense share calculation
* ``services`` – repository-backed operations that notify the user
* ``visualization`` – Plotly figures for the chart payloads
"""

from . import grouping  # noqa: F401  # re-exported for convenience
from . import investments  # noqa: F401  # re-exported for convenience
from . import splits  # noqa: F401  # re-exported for convenience
from . import summary  # noqa: F401  # re-exported for convenience
from .grouping import category_chart_data, group_by_category
from .investments import project_growth
from .splits import calculate_shares
from .summary import calculate_summary

__version__ = "0.1.0"

__all__ = [
    "grouping",
    "investments",
    "splits",
    "summary",
    "calculate_summary",
    "group_by_category",
    "category_chart_data",
    "project_growth",
    "calculate_shares",
]
