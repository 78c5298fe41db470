from __future__ import annotations
import math
from collections.abc import Mapping
from typing import Any

import pandas as pd

from .formatting import FormatContext, resolve_context, plain_number, parse_timestamp, looks_like_date, humanize
from .parsing import RawKind, raw_kind, parse_number, display_text
from .schemas import TradeCell, TradeTable

PRIORITY_COLUMNS = [
    "symbol",
    "entry_date",
    "position_status",
    "entry",
    "target",
    "stop",
    "length",
    "pnl",
]

POSITION_STATUS = {
    "LONG_POS": "Long",
    "SHORT_POS": "Short",
}

PREVIEW_LIMIT = 10


def resolve_trade_columns(columns: Any) -> list[str]:
    """
    Canonical columns the backend declared, in priority order,
    spelled the way the backend spelled them.
    """
    if raw_kind(columns) is not RawKind.NESTED or isinstance(columns, Mapping):
        return []
    lower_to_original: dict[str, str] = {}
    for col in columns:
        if isinstance(col, str):
            lower_to_original[col.lower()] = col
    return [lower_to_original[k] for k in PRIORITY_COLUMNS if k in lower_to_original]


def format_trade_cell(value: Any, column: str | None = None, ctx: FormatContext | None = None) -> str:
    ctx = resolve_context(ctx)
    if column is not None and column.lower() == "position_status":
        status = POSITION_STATUS.get(str(value) if value is not None else "")
        if status is not None:
            return status

    kind = raw_kind(value)
    if kind is RawKind.NULL:
        return ctx.placeholder
    if kind is RawKind.NUMBER:
        if not math.isfinite(float(value)):
            return display_text(value)
        return plain_number(float(value), ctx)
    if kind is RawKind.STRING:
        text = value.strip()
        if not text:
            return ctx.placeholder
        if looks_like_date(text):
            ts = parse_timestamp(text, ctx)
            if ts is not None:
                return ts.strftime(ctx.datetime_format)
        num = parse_number(text)
        if num is not None:
            return plain_number(num, ctx)
        return text
    return display_text(value)


def _cell_value(row: Mapping[str, Any], column: str) -> Any:
    value = row.get(column)
    if value is None:
        value = row.get(column.lower())
    return value


def trade_cell(row: Mapping[str, Any], column: str, ctx: FormatContext | None = None) -> TradeCell:
    """
    Formatted cell plus its parsed number; P&L cells get a tone
    so the caller can colour them.
    """
    value = _cell_value(row, column)
    numeric = parse_number(value)
    tone = None
    if column.lower() == "pnl" and numeric is not None:
        tone = "neg" if numeric < 0 else "pos" if numeric > 0 else None
    return TradeCell(text=format_trade_cell(value, column, ctx), numeric=numeric, tone=tone)


def build_trade_table(rows: Any, columns: Any, limit: int = PREVIEW_LIMIT,
                      ctx: FormatContext | None = None) -> TradeTable:
    resolved = resolve_trade_columns(columns)
    if raw_kind(rows) is not RawKind.NESTED or isinstance(rows, Mapping) or not resolved:
        return TradeTable(columns=resolved, headers=[humanize(c) for c in resolved])

    rows = [r for r in rows if isinstance(r, Mapping)]
    if limit > 0:
        rows = rows[-limit:]
    return TradeTable(
        columns=resolved,
        headers=[humanize(c) for c in resolved],
        rows=[[trade_cell(r, c, ctx) for c in resolved] for r in rows],
    )


def table_frame(table: TradeTable) -> pd.DataFrame:
    return pd.DataFrame(
        [[cell.text for cell in row] for row in table.rows],
        columns=table.headers,
    )


def pnl_colors(table: TradeTable, pos: str = "#16a34a", neg: str = "#dc2626") -> pd.DataFrame:
    """CSS per cell, for DataFrame.style.apply(axis=None)."""
    css = [
        ["" if cell.tone is None else f"color: {pos if cell.tone == 'pos' else neg}" for cell in row]
        for row in table.rows
    ]
    return pd.DataFrame(css, columns=table.headers)
