from __future__ import annotations
import logging

from backtest_review.config import ReviewSettings
from backtest_review.metrics import build_headline_metrics, build_metric_groups
from backtest_review.review import build_review
from backtest_review.schemas import BacktestDetail, BacktestReview, TradeTable
from backtest_review.trades import build_trade_table

from ..models import MetricsRequest, MetricsResponse, TradesRequest

logger = logging.getLogger(__name__)


def review_detail(detail: BacktestDetail, settings: ReviewSettings) -> BacktestReview:
    logger.info("building review for backtest %s (%s)", detail.id, detail.status)
    return build_review(detail, settings.format_context(), trades_limit=settings.trades_preview_limit)


def review_metrics(req: MetricsRequest, settings: ReviewSettings) -> MetricsResponse:
    ctx = settings.format_context()
    return MetricsResponse(
        headline=build_headline_metrics(req.summary_metrics, ctx),
        groups=build_metric_groups(req.summary_metrics, ctx),
    )


def review_trades(req: TradesRequest, settings: ReviewSettings) -> TradeTable:
    limit = req.limit or settings.trades_preview_limit
    return build_trade_table(req.trades_preview, req.trades_columns, limit=limit, ctx=settings.format_context())
