from __future__ import annotations

"""Plotly figures rendered by the Streamlit pages (``st.plotly_chart``)."""

from typing import Any, Dict, List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go


def _layout(fig: go.Figure, title: str, yaxis: str = "") -> go.Figure:
    fig.update_layout(
        title=title,
        yaxis_title=yaxis,
        hovermode="x unified",
        margin=dict(l=20, r=20, t=50, b=20),
        legend=dict(orientation="h", y=-0.2),
    )
    return fig


def line_figure(rows: List[Dict[str, Any]], x: str, columns: List[str], title: str, yaxis: str = "") -> go.Figure:
    df = pd.DataFrame(rows)
    fig = go.Figure()
    for col in columns:
        if col in df.columns:
            fig.add_trace(go.Scatter(x=df[x], y=df[col], mode="lines+markers", name=col))
    return _layout(fig, title, yaxis)


def bar_figure(labels: List[str], values: List[float], title: str, yaxis: str = "") -> go.Figure:
    fig = px.bar(x=labels, y=values, labels={"x": "", "y": yaxis})
    return _layout(fig, title, yaxis)


def pie_figure(rows: List[Dict[str, Any]], title: str) -> go.Figure:
    df = pd.DataFrame(rows)
    fig = px.pie(df, names="name", values="value")
    fig.update_layout(title=title, margin=dict(l=20, r=20, t=50, b=20))
    return fig


def forecast_figure(hourly: List[Dict[str, Any]], parameter: str, optimal: Optional[Dict[str, float]] = None) -> go.Figure:
    """One parameter across the projection, with the optimal band shaded."""
    df = pd.DataFrame(hourly)
    fig = go.Figure(go.Scatter(x=df["time"], y=df[parameter], mode="lines", name=parameter))
    if optimal:
        fig.add_hrect(y0=optimal["min"], y1=optimal["max"], fillcolor="green", opacity=0.1, line_width=0)
    return _layout(fig, f"{parameter} projection", parameter)


def cash_flow_figure(rows: List[Dict[str, Any]]) -> go.Figure:
    df = pd.DataFrame(rows)
    fig = go.Figure()
    fig.add_trace(go.Bar(x=df["month"], y=df["income"], name="Income"))
    fig.add_trace(go.Bar(x=df["month"], y=df["expenses"], name="Expenses"))
    fig.add_trace(go.Scatter(x=df["month"], y=df["balance"].cumsum(), name="Cumulative balance"))
    fig.update_layout(barmode="group")
    return _layout(fig, "Monthly cash flow", "Amount")


def growth_figure(rows: List[Dict[str, Any]], x: str = "date", y: str = "weight") -> go.Figure:
    df = pd.DataFrame(rows)
    fig = px.line(df, x=x, y=y, markers=True)
    return _layout(fig, "Growth", y)
