from __future__ import annotations
from typing import Literal, Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

Tone = Optional[Literal["pos", "neg"]]


class BacktestDetail(BaseModel):
    """
    Detail payload as the backtest backend returns it.
    Everything is loose on purpose: shape problems are handled
    by the builders, not by validation.
    """
    model_config = ConfigDict(extra="allow")

    id: Optional[int] = None
    backtest_name: Optional[str] = None
    status: Optional[str] = None
    created_at: Optional[str] = None
    saved_at_utc: Optional[str] = None
    config: Any = Field(default_factory=dict)
    summary_metrics: Any = Field(default_factory=dict)
    equity_curve: Any = Field(default_factory=list)
    drawdown_curve: Any = Field(default_factory=list)
    trades_preview: Any = Field(default_factory=list)
    trades_columns: Any = Field(default_factory=list)
    participated_symbols: Any = Field(default_factory=list)
    entry_text_long: Optional[str] = None
    entry_text_short: Optional[str] = None


class FormattedValue(BaseModel):
    formatted: str
    negative: bool = False


class MetricItem(BaseModel):
    label: str
    value: str
    negative: bool = False
    unit: Optional[str] = None


class MetricGroup(BaseModel):
    group: str
    items: List[MetricItem]


class HeadlineMetric(BaseModel):
    label: str
    value: str
    tone: Tone = None


class EquityPoint(BaseModel):
    date: Optional[str] = None
    balance: float


class ChartSeries(BaseModel):
    labels: List[str] = Field(default_factory=list)
    values: List[float] = Field(default_factory=list)


class TradeCell(BaseModel):
    text: str
    numeric: Optional[float] = None
    tone: Tone = None


class TradeTable(BaseModel):
    columns: List[str] = Field(default_factory=list)
    headers: List[str] = Field(default_factory=list)
    rows: List[List[TradeCell]] = Field(default_factory=list)


class ExitSettings(BaseModel):
    type: str
    atr_period: Optional[Any] = None
    take_profit_label: str
    take_profit: Optional[Any] = None
    stop_loss_label: str
    stop_loss: Optional[Any] = None


class SideSettings(BaseModel):
    side: Literal["long", "short"]
    enabled: bool = False
    offset: str = "—"
    entry_text: Optional[str] = None
    condition_code: str = ""
    exit: Optional[ExitSettings] = None


class StrategySettings(BaseModel):
    starting_balance: Optional[str] = None
    per_trade_usd: Optional[str] = None
    selected_symbols: List[str] = Field(default_factory=list)
    participated_symbols: List[str] = Field(default_factory=list)
    long: SideSettings
    short: SideSettings


class ReviewHeader(BaseModel):
    title: str
    status: Optional[str] = None
    status_tone: Tone = None
    created: str = "—"
    saved: Optional[str] = None


class BacktestReview(BaseModel):
    header: ReviewHeader
    headline: List[HeadlineMetric]
    groups: List[MetricGroup]
    equity: ChartSeries
    equity_first_label: str = ""
    equity_last_label: str = ""
    drawdown: ChartSeries
    trade_duration: ChartSeries
    trades: TradeTable
    strategy: StrategySettings
    meta: Dict[str, Any] = Field(default_factory=dict)
