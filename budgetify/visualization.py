"""Plotly figure builders for Budgetify chart payloads.

Each function takes the plain lists returned by the aggregation
modules (``[{'name', 'value'}]``, ``[{'date', 'value'}]`` and so on)
and returns a ``plotly.graph_objects.Figure``.  Rendering is left to
whatever front end embeds the figure.
"""

from __future__ import annotations

from typing import Dict, List, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

COLORS = [
    "#0EA5E9",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#8B5CF6",
    "#EC4899",
    "#6B7280",
    "#14B8A6",
]


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_category_pie_chart(rows: Sequence[Dict[str, object]], title: str | None = None) -> go.Figure:
    """Pie chart of ``[{'name', 'value'}]`` rows, e.g. expenses by category.

    Parameters
    ----------
    rows : sequence of dict
        Output of :func:`budgetify.grouping.category_chart_data`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart.
    """
    if not rows:
        return _empty_figure()
    df = pd.DataFrame(list(rows), columns=["name", "value"])
    fig = px.pie(df, names="name", values="value", color_discrete_sequence=COLORS)
    fig.update_layout(title=title or "Expenses by category")
    return fig


def create_monthly_bar_chart(rows: Sequence[Dict[str, object]], title: str | None = None) -> go.Figure:
    """Grouped income/expense bars from :func:`budgetify.summary.monthly_breakdown`."""
    if not rows:
        return _empty_figure()
    df = pd.DataFrame(list(rows))
    fig = go.Figure(
        data=[
            go.Bar(name="Income", x=df["month"], y=df["income"], marker_color=COLORS[1]),
            go.Bar(name="Expenses", x=df["month"], y=df["expenses"], marker_color=COLORS[3]),
        ]
    )
    fig.update_layout(
        title=title or "Income vs expenses",
        barmode="group",
        xaxis_title="Month",
        yaxis_title="Amount",
    )
    return fig


def create_projection_chart(points: List[Dict[str, object]], title: str | None = None) -> go.Figure:
    """Area chart of the portfolio projection from :func:`budgetify.investments.project_growth`."""
    if not points:
        return _empty_figure()
    df = pd.DataFrame(points, columns=["date", "value"])
    fig = px.area(df, x="date", y="value")
    fig.update_traces(line_color=COLORS[4])
    fig.update_layout(
        title=title or "Portfolio projection",
        xaxis_title="Month",
        yaxis_title="Projected value",
    )
    return fig
