from __future__ import annotations
import html

import plotly.graph_objects as go

from .schemas import ChartSeries

EQUITY_COLOR = "#2563eb"
DRAWDOWN_COLOR = "#dc2626"
BAR_COLOR = "#2563eb"
LABEL_COLOR = "#64748b"
UNIT_COLOR = "#94a3b8"


def equity_figure(series: ChartSeries, height: int = 420) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=series.labels, y=series.values, mode="lines", name="Equity",
        line=dict(color=EQUITY_COLOR), fill="tozeroy",
        hovertemplate="%{x}<br><b>Balance</b>: $%{y:,.2f}<extra></extra>",
    ))
    fig.update_layout(hovermode="x unified", height=height, xaxis_title="Date", yaxis_title="Balance ($)")
    return fig


def drawdown_figure(series: ChartSeries, height: int = 320) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=series.labels, y=series.values, mode="lines", name="Drawdown",
        line=dict(color=DRAWDOWN_COLOR), fill="tozeroy",
        hovertemplate="DD: %{y:.2f}%<extra></extra>",
    ))
    fig.update_layout(hovermode="x unified", height=height, xaxis_title="Bar", yaxis_title="Drawdown (%)")
    return fig


def duration_figure(series: ChartSeries, height: int = 320) -> go.Figure:
    # category axis keeps the numeric bucket order the builder produced
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=series.labels, y=series.values, name="Trades",
        marker_color=BAR_COLOR, text=series.values, textposition="outside",
    ))
    fig.update_layout(height=height, xaxis_title="Holding period", yaxis_title="Trades")
    fig.update_xaxes(type="category")
    return fig


def metric_card_html(label: str, value: str, color: str, size: int = 18, unit: str | None = None) -> str:
    """
    HTML for one metric tile. Labels, values and units come from the
    backend, so they are escaped before going into the markup.
    """
    unit_html = (f" <span style='font-size:12px;color:{UNIT_COLOR}'>{html.escape(unit)}</span>"
                 if unit else "")
    return (f"<div style='font-size:12px;color:{LABEL_COLOR}'>{html.escape(label.upper())}</div>"
            f"<div style='font-size:{size}px;font-weight:600;color:{color}'>{html.escape(value)}{unit_html}</div>")
