from __future__ import annotations
import logging
import math
from collections.abc import Mapping
from typing import Any

from .formatting import FormatContext, date_label
from .parsing import RawKind, raw_kind, parse_number, is_finite_number, number_label
from .schemas import EquityPoint, ChartSeries

logger = logging.getLogger(__name__)


def normalize_equity_curve(raw: Any) -> list[EquityPoint]:
    """
    Keep points in the order the backend sent them (assumed chronological).
    Points that are not objects or carry no usable balance are dropped.
    """
    if raw_kind(raw) is not RawKind.NESTED or isinstance(raw, Mapping):
        return []

    points = []
    for i, p in enumerate(raw):
        if not isinstance(p, Mapping):
            logger.debug("equity point %d is not an object, skipped", i)
            continue
        bal = parse_number(p.get("balance"))
        if bal is None:
            logger.debug("equity point %d has no numeric balance, skipped", i)
            continue
        dt = p.get("date")
        points.append(EquityPoint(date=None if dt is None else str(dt), balance=bal))
    return points


def build_equity_series(raw: Any, ctx: FormatContext | None = None) -> ChartSeries:
    points = normalize_equity_curve(raw)
    return ChartSeries(
        labels=[date_label(p.date, ctx) for p in points],
        values=[p.balance for p in points],
    )


def build_drawdown_series(raw: Any) -> ChartSeries:
    # fractions (-0.12) become percents (-12.0); anything else plots as 0
    if raw_kind(raw) is not RawKind.NESTED or isinstance(raw, Mapping):
        return ChartSeries()
    values = [float(v) * 100.0 if is_finite_number(v) else 0.0 for v in raw]
    return ChartSeries(labels=[str(i) for i in range(len(values))], values=values)


def _bucket(label: Any) -> float | None:
    try:
        num = float(str(label).strip())
    except ValueError:
        return None
    return num if math.isfinite(num) else None


def build_trade_duration_series(raw: Any) -> ChartSeries:
    """
    Bucket label -> count, sorted by the numeric bucket.
    Backend insertion order is not trusted.
    """
    if not isinstance(raw, Mapping):
        return ChartSeries()

    entries = []
    for label, value in raw.items():
        bucket = _bucket(label)
        count = parse_number(value)
        if bucket is None or count is None:
            continue
        entries.append((bucket, count))

    entries.sort(key=lambda e: e[0])
    return ChartSeries(
        labels=[number_label(b) for b, _ in entries],
        values=[c for _, c in entries],
    )


def edge_labels(series: ChartSeries) -> tuple[str, str]:
    if not series.labels:
        return "", ""
    return series.labels[0], series.labels[-1]
