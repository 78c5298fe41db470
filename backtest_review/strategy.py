from __future__ import annotations
from collections.abc import Mapping
from typing import Any, Literal

from .formatting import FormatContext, resolve_context, money, date_time
from .parsing import parse_number
from .schemas import ExitSettings, SideSettings, StrategySettings, ReviewHeader

STATUS_TONES = {
    "completed": "pos",
    "failed": "neg",
}


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _strings(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [v for v in value if isinstance(v, str)]


def _money_or_none(*candidates: Any, ctx: FormatContext) -> str | None:
    # zero counts as "not set", same as a missing value
    for c in candidates:
        num = parse_number(c)
        if num:
            return money(num, ctx)
    return None


def _exit_settings(side_cfg: Mapping[str, Any], side: str) -> ExitSettings | None:
    exit_type = side_cfg.get(f"exit_type_position_{side}")
    if not exit_type:
        return None

    atr = exit_type == "atr"
    atr_cfg = side_cfg.get(f"atr_config_{side}")
    atr_period = atr_cfg.get("period") if atr and isinstance(atr_cfg, Mapping) else None
    return ExitSettings(
        type="ATR" if atr else "Percentage",
        atr_period=atr_period,
        take_profit_label="TP (ATR multiple)" if atr else "TP %",
        take_profit=side_cfg.get(f"tp_{side}"),
        stop_loss_label="SL (ATR multiple)" if atr else "SL %",
        stop_loss=side_cfg.get(f"sl_{side}"),
    )


def build_side_settings(detail: Mapping[str, Any], side: Literal["long", "short"],
                        ctx: FormatContext | None = None) -> SideSettings:
    ctx = resolve_context(ctx)
    config = _as_mapping(detail.get("config"))
    side_cfg = _as_mapping(config.get(f"{side}_config"))
    ai_entry = _as_mapping(config.get("ai_entry"))
    enabled = bool(config.get(f"{side}_enabled"))

    entry_text = detail.get(f"entry_text_{side}")
    if entry_text is None:
        entry_text = side_cfg.get(f"entry_explanation_{side}")

    code = ai_entry.get(f"condition_code_{side}")
    offset = ai_entry.get(f"offset_{side}")

    return SideSettings(
        side=side,
        enabled=enabled,
        offset=ctx.placeholder if offset is None else str(offset),
        entry_text=None if entry_text is None else str(entry_text),
        condition_code=code.strip() if isinstance(code, str) else "",
        exit=_exit_settings(side_cfg, side) if enabled else None,
    )


def build_strategy_settings(detail: Mapping[str, Any], ctx: FormatContext | None = None) -> StrategySettings:
    """
    Strategy settings panel: balances, symbols and the long/short
    entry and exit configuration.
    Summary metrics win over the submitted config when both are set.
    """
    ctx = resolve_context(ctx)
    summary = _as_mapping(detail.get("summary_metrics"))
    config = _as_mapping(detail.get("config"))

    per_trade = summary.get("Per_Trade_USD")
    if per_trade is None:
        per_trade = summary.get("per_trade_usd")

    return StrategySettings(
        starting_balance=_money_or_none(summary.get("Initial_Balance"), config.get("starting_balance"), ctx=ctx),
        per_trade_usd=_money_or_none(per_trade, config.get("usd_per_trade"), ctx=ctx),
        selected_symbols=_strings(config.get("selected_symbols")),
        participated_symbols=_strings(detail.get("participated_symbols")),
        long=build_side_settings(detail, "long", ctx),
        short=build_side_settings(detail, "short", ctx),
    )


def build_review_header(detail: Mapping[str, Any], ctx: FormatContext | None = None) -> ReviewHeader:
    ctx = resolve_context(ctx)
    config = _as_mapping(detail.get("config"))

    name = detail.get("backtest_name")
    ident = detail.get("id")
    title = str(name) if name else f"Backtest #{ident if ident is not None else '?'}"

    status = detail.get("status")
    status = None if status is None else str(status)

    saved = detail.get("saved_at_utc")
    if saved is None:
        saved = config.get("saved_at_utc")

    return ReviewHeader(
        title=title,
        status=status,
        status_tone=STATUS_TONES.get(status or ""),
        created=date_time(detail.get("created_at"), ctx) or ctx.placeholder,
        saved=date_time(saved, ctx) if saved else None,
    )
