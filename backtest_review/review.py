from __future__ import annotations
import logging
from collections.abc import Mapping
from typing import Any

from .formatting import FormatContext, resolve_context
from .metrics import build_headline_metrics, build_metric_groups
from .schemas import BacktestDetail, BacktestReview
from .series import build_equity_series, build_drawdown_series, build_trade_duration_series, edge_labels
from .strategy import build_review_header, build_strategy_settings
from .trades import build_trade_table, PREVIEW_LIMIT

logger = logging.getLogger(__name__)


def _as_dict(detail: BacktestDetail | Mapping[str, Any] | None) -> Mapping[str, Any]:
    if isinstance(detail, BacktestDetail):
        return detail.model_dump()
    if isinstance(detail, Mapping):
        return detail
    return {}


def build_review(
    detail: BacktestDetail | Mapping[str, Any] | None,
    ctx: FormatContext | None = None,
    trades_limit: int = PREVIEW_LIMIT,
) -> BacktestReview:
    """
    Everything the review page shows, built from one detail payload.
    Missing or malformed sections come back empty instead of raising.
    """
    ctx = resolve_context(ctx)
    d = _as_dict(detail)
    summary = d.get("summary_metrics")
    if not isinstance(summary, Mapping):
        summary = {}

    equity = build_equity_series(d.get("equity_curve"), ctx)
    first_label, last_label = edge_labels(equity)

    review = BacktestReview(
        header=build_review_header(d, ctx),
        headline=build_headline_metrics(summary, ctx),
        groups=build_metric_groups(summary, ctx),
        equity=equity,
        equity_first_label=first_label,
        equity_last_label=last_label,
        drawdown=build_drawdown_series(d.get("drawdown_curve")),
        trade_duration=build_trade_duration_series(summary.get("Trade_Duration_Distribution")),
        trades=build_trade_table(d.get("trades_preview"), d.get("trades_columns"), limit=trades_limit, ctx=ctx),
        strategy=build_strategy_settings(d, ctx),
        meta={"id": d.get("id"), "metric_count": len(summary)},
    )
    logger.debug(
        "built review for backtest %s: %d groups, %d equity points, %d trade rows",
        d.get("id"), len(review.groups), len(review.equity.values), len(review.trades.rows),
    )
    return review
