from __future__ import annotations
from typing import Optional, List, Any
from pydantic import BaseModel, Field

from backtest_review.schemas import HeadlineMetric, MetricGroup


class MetricsRequest(BaseModel):
    summary_metrics: Any = Field(default_factory=dict)


class MetricsResponse(BaseModel):
    headline: List[HeadlineMetric]
    groups: List[MetricGroup]


class TradesRequest(BaseModel):
    trades_preview: Any = Field(default_factory=list)
    trades_columns: Any = Field(default_factory=list)
    limit: Optional[int] = Field(default=None, ge=1)


class Health(BaseModel):
    ok: bool = True
