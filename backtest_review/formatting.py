from __future__ import annotations
import logging
import math
import re
from typing import Any

import pandas as pd
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

NEAR_ZERO = 1e-10

# YYYY-MM-DD, YYYY/MM/DD or M/D/YYYY, optionally followed by a time
DATE_SHAPE = re.compile(r"^(\d{4}-\d{1,2}-\d{1,2}|\d{4}/\d{1,2}/\d{1,2}|\d{1,2}/\d{1,2}/\d{4})(?:[T ]|$)")


class FormatContext(BaseModel):
    """
    Everything locale-ish the formatters need, passed in explicitly.
    """
    model_config = ConfigDict(frozen=True)

    currency_symbol: str = "$"
    placeholder: str = "—"
    date_label_format: str = "%b %d, %Y"
    datetime_format: str = "%m/%d/%Y, %I:%M:%S %p"
    timezone: str = "UTC"
    number_max_decimals: int = 4


DEFAULT_CONTEXT = FormatContext()


def resolve_context(ctx: FormatContext | None) -> FormatContext:
    return ctx if ctx is not None else DEFAULT_CONTEXT


def squash(x: float) -> float:
    return 0.0 if abs(x) < NEAR_ZERO else x


def money(x: float, ctx: FormatContext | None = None) -> str:
    ctx = resolve_context(ctx)
    x = float(x)
    sign = "-" if x < 0 else ""
    return f"{sign}{ctx.currency_symbol}{abs(x):,.2f}"


def pct(x: float) -> str:
    # |x| <= 1 is read as a fraction, anything bigger is already in percent
    x = float(x)
    scaled = x if abs(x) > 1 else x * 100.0
    return f"{scaled:.2f}%"


def plain_number(x: float, ctx: FormatContext | None = None) -> str:
    ctx = resolve_context(ctx)
    x = squash(float(x))
    text = f"{x:,.{ctx.number_max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        # -0.00001 keeps its sign in JS-style output too
        return text if x < 0 else "0"
    return text


def integer(x: float) -> str:
    return f"{int(math.floor(float(x) + 0.5)):,}"


def parse_timestamp(text: Any, ctx: FormatContext | None = None) -> pd.Timestamp | None:
    if not isinstance(text, str) or not text.strip():
        return None
    # a date always has a digit; "now" and "today" are not dates
    if not any(ch.isdigit() for ch in text):
        return None
    try:
        ts = pd.Timestamp(text.strip())
    except (ValueError, TypeError, OverflowError):
        logger.debug("unparseable date %r", text)
        return None
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(resolve_context(ctx).timezone).tz_localize(None)
    return ts


def looks_like_date(text: str) -> bool:
    return DATE_SHAPE.match(text.strip()) is not None


def date_label(value: str | None, ctx: FormatContext | None = None) -> str:
    if not value:
        return ""
    ts = parse_timestamp(value, ctx)
    if ts is None:
        return str(value)
    return ts.strftime(resolve_context(ctx).date_label_format)


def date_time(value: Any, ctx: FormatContext | None = None) -> str | None:
    if not value:
        return None
    text = str(value)
    ts = parse_timestamp(text, ctx)
    if ts is None:
        return text
    return ts.strftime(resolve_context(ctx).datetime_format)


def humanize(key: str) -> str:
    return key.replace("_", " ")
