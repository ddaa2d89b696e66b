"""Plotly figures for the Overview and Budgets sections.

Each function accepts a frame from :mod:`toku_budget.analytics` and returns a
``plotly.graph_objects.Figure`` that Streamlit renders via
``st.plotly_chart``.  An empty input yields an empty figure with a
"No data to display" title rather than raising.
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_category_pie(breakdown: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Donut chart of expense totals per category.

    Parameters
    ----------
    breakdown : pandas.DataFrame
        Output of :func:`toku_budget.analytics.category_breakdown`.
    title : str, optional
        Chart title.
    """
    if breakdown.empty:
        return _empty_figure()
    df = breakdown.assign(Value=breakdown['Amount'].map(float))
    fig = px.pie(df, names='Category', values='Value', hole=0.45)
    fig.update_traces(textposition='inside', textinfo='percent+label')
    fig.update_layout(title=title or "Spending by category", showlegend=False)
    return fig


def create_daily_flow_chart(flow: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Grouped bars of income and expenses per day."""
    if flow.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(x=flow['Day'], y=flow['Income'], name='Income', marker_color='#16A34A'))
    fig.add_trace(go.Bar(x=flow['Day'], y=flow['Expenses'], name='Expenses', marker_color='#DC2626'))
    fig.update_layout(
        title=title or "Daily cash flow",
        barmode='group',
        xaxis_title="Day",
        yaxis_title="Amount",
    )
    return fig


def create_budget_bar(breakdown: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Horizontal bars of spending per category, largest at the top."""
    if breakdown.empty:
        return _empty_figure()
    df = breakdown.assign(Value=breakdown['Amount'].map(float)).iloc[::-1]
    fig = px.bar(df, x='Value', y='Category', orientation='h')
    fig.update_layout(title=title or "Spending by category", xaxis_title="Amount", yaxis_title="")
    return fig
