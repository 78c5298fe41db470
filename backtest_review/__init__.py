from .parsing import parse_number, raw_kind, RawKind
from .formatting import FormatContext
from .metrics import format_metric_value, build_metric_groups, build_headline_metrics
from .series import build_equity_series, build_drawdown_series, build_trade_duration_series
from .trades import resolve_trade_columns, format_trade_cell, build_trade_table
from .review import build_review

__all__ = [
    "parse_number",
    "raw_kind",
    "RawKind",
    "FormatContext",
    "format_metric_value",
    "build_metric_groups",
    "build_headline_metrics",
    "build_equity_series",
    "build_drawdown_series",
    "build_trade_duration_series",
    "resolve_trade_columns",
    "format_trade_cell",
    "build_trade_table",
    "build_review",
]
