from __future__ import annotations
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .formatting import FormatContext, resolve_context, money, pct, plain_number, integer, squash, humanize
from .parsing import RawKind, raw_kind, parse_number, display_text
from .schemas import FormattedValue, MetricItem, MetricGroup, HeadlineMetric

logger = logging.getLogger(__name__)

METRIC_GROUPS: list[tuple[str, list[str]]] = [
    ("Balances & Returns", [
        "Initial_Balance", "final_balance", "Total_Return_Profit_%", "final_pnl", "Annualized_Return",
    ]),
    ("Trade Stats", [
        "Number_of_Trades", "Win_Rate", "Profit_Factor",
        "Risk_Reward_Ratio", "Average_Profit_per_Trade", "Recovery_Factor",
    ]),
    ("Risk & Volatility", ["Maximum_Drawdown", "Sharpe_Ratio", "Sortino_Ratio"]),
    ("Durations & Streaks", ["Average_Holding_Period", "Max_Win_Streak", "Max_Loss_Streak"]),
]
OTHER_GROUP = "Other"

# chart-only series, drawn separately
HIDE_FROM_OTHER = frozenset({"Equity_Curve", "Trade_Duration_Distribution"})

# internal fields or duplicates of something already shown
OTHER_EXCLUDE = frozenset({
    "Total_Return_Profit_$", "Recovery_Factor", "Total_Return_Net_Profit",
    "Time_in_Market", "time_in_market",
    "Per_Trade_USD", "per_trade_usd",
    "CAGR", "Volatility", "Calmar_Ratio", "Expectancy",
    "Transaction_Costs", "transaction_costs", "Transaction_Cost", "transaction_cost",
    "Ulcer_Index", "ulcer_index",
})

SPECIAL_LABELS = {
    "final_pnl": "Final PnL",
    "Average_Profit_per_Trade": "Average Profit per Trade",
}

UNIT_SUFFIXES = {
    "Average_Holding_Period": "Candles",
}

TRADE_COUNT_KEYS = ("Number_of_Trades", "total_trades")
FINAL_PNL_KEYS = ("final_pnl", "Total_Return_Profit_$", "Profit_$", "Total_Return_$")
ANNUALIZED_KEYS = ("Annualized_Return",)


def _is_currency(key: str, lower: str) -> bool:
    return (
        "$" in key
        or "usd" in lower
        or "balance" in lower
        or lower.endswith("_$")
        or "profit_$" in lower
        or lower in ("final_pnl", "average_profit_per_trade")
    )


def _is_percent(key: str, lower: str) -> bool:
    return (
        key.endswith("_%")
        or "%" in key
        or "drawdown" in lower
        or "rate" in lower
        or "return" in lower
    )


def _is_count(key: str, lower: str) -> bool:
    return lower == "number_of_trades"


def _currency(num: float, ctx: FormatContext) -> FormattedValue:
    return FormattedValue(formatted=money(num, ctx), negative=num < 0)


def _percent(num: float, ctx: FormatContext) -> FormattedValue:
    return FormattedValue(formatted=pct(num), negative=num < 0)


def _count(num: float, ctx: FormatContext) -> FormattedValue:
    return FormattedValue(formatted=integer(num), negative=num < 0)


def _number(num: float, ctx: FormatContext) -> FormattedValue:
    num = squash(num)
    return FormattedValue(formatted=plain_number(num, ctx), negative=num < 0)


@dataclass(frozen=True)
class MetricRule:
    kind: str
    matches: Callable[[str, str], bool]
    render: Callable[[float, FormatContext], FormattedValue]


# evaluated top to bottom, first match wins; the last rule catches everything
METRIC_RULES: list[MetricRule] = [
    MetricRule("currency", _is_currency, _currency),
    MetricRule("percent", _is_percent, _percent),
    MetricRule("count", _is_count, _count),
    MetricRule("number", lambda key, lower: True, _number),
]


def rule_for(key: str) -> MetricRule:
    lower = key.lower()
    return next(rule for rule in METRIC_RULES if rule.matches(key, lower))


def classify_metric(key: str) -> str:
    return rule_for(key).kind


def format_metric_value(key: str, value: Any, ctx: FormatContext | None = None) -> FormattedValue:
    """
    Pick a display kind from the key name and render the value.
    Unknown shapes come back as plain text rather than raising.
    """
    ctx = resolve_context(ctx)
    kind = raw_kind(value)
    if kind is RawKind.NULL:
        return FormattedValue(formatted=ctx.placeholder, negative=False)
    if kind is RawKind.BOOL:
        return FormattedValue(formatted="Yes" if value else "No", negative=False)

    num = parse_number(value)
    if num is None:
        logger.debug("metric %s: passing through non-numeric value %r", key, value)
        return FormattedValue(formatted=display_text(value), negative=False)

    return rule_for(key).render(num, ctx)


def _metric_item(key: str, value: Any, ctx: FormatContext) -> MetricItem:
    fv = format_metric_value(key, value, ctx)
    return MetricItem(
        label=SPECIAL_LABELS.get(key, humanize(key)),
        value=fv.formatted,
        negative=fv.negative,
        unit=UNIT_SUFFIXES.get(key),
    )


def build_metric_groups(summary: Mapping[str, Any] | None, ctx: FormatContext | None = None) -> list[MetricGroup]:
    ctx = resolve_context(ctx)
    if not isinstance(summary, Mapping):
        return []

    seen: set[str] = set()
    groups: list[MetricGroup] = []
    for group, keys in METRIC_GROUPS:
        items = []
        for key in keys:
            if key not in summary:
                continue
            items.append(_metric_item(key, summary[key], ctx))
            seen.add(key)
        if items:
            groups.append(MetricGroup(group=group, items=items))

    extras = []
    for key, value in summary.items():
        key = str(key)
        if key in seen or key in HIDE_FROM_OTHER or key in OTHER_EXCLUDE:
            continue
        extras.append(_metric_item(key, value, ctx))
    if extras:
        groups.append(MetricGroup(group=OTHER_GROUP, items=extras))
    return groups


def _first_present(summary: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = summary.get(key)
        if value is not None:
            return value
    return None


def _tone(num: float) -> str | None:
    if num > 0:
        return "pos"
    if num < 0:
        return "neg"
    return None


def _headline(label: str, value: Any, kind: str, ctx: FormatContext) -> HeadlineMetric:
    num = parse_number(value)
    if num is None:
        return HeadlineMetric(label=label, value=ctx.placeholder, tone=None)
    if kind == "count":
        return HeadlineMetric(label=label, value=integer(num), tone=None)
    if kind == "currency":
        return HeadlineMetric(label=label, value=money(num, ctx), tone=_tone(num))
    return HeadlineMetric(label=label, value=pct(num), tone=_tone(num))


def build_headline_metrics(summary: Mapping[str, Any] | None, ctx: FormatContext | None = None) -> list[HeadlineMetric]:
    ctx = resolve_context(ctx)
    if not isinstance(summary, Mapping):
        summary = {}
    return [
        _headline("Total trades", _first_present(summary, TRADE_COUNT_KEYS), "count", ctx),
        _headline("Final PnL", _first_present(summary, FINAL_PNL_KEYS), "currency", ctx),
        _headline("Annualized Return", _first_present(summary, ANNUALIZED_KEYS), "percent", ctx),
    ]
