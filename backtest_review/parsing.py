from __future__ import annotations
import math
from collections.abc import Mapping
from enum import Enum
from typing import Any

import numpy as np


class RawKind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    NESTED = "nested"
    OTHER = "other"


def raw_kind(value: Any) -> RawKind:
    """
    Tag a raw JSON-ish value so callers can branch on one kind
    instead of probing types themselves.
    bool is checked before numbers (bool is an int subclass).
    """
    if value is None:
        return RawKind.NULL
    if isinstance(value, (bool, np.bool_)):
        return RawKind.BOOL
    if isinstance(value, (int, float, np.integer, np.floating)):
        return RawKind.NUMBER
    if isinstance(value, str):
        return RawKind.STRING
    if isinstance(value, (Mapping, list, tuple)):
        return RawKind.NESTED
    return RawKind.OTHER


def parse_number(value: Any) -> float | None:
    """
    Numbers pass through, strings lose their thousands separators.
    Absence is None, never 0 or NaN.
    """
    kind = raw_kind(value)
    if kind is RawKind.NUMBER:
        num = float(value)
        return num if math.isfinite(num) else None
    if kind is RawKind.STRING:
        cleaned = value.replace(",", "").strip()
        # float() also takes "1_000" and non-ASCII digits
        if not cleaned or "_" in cleaned or not cleaned.isascii():
            return None
        try:
            num = float(cleaned)
        except ValueError:
            return None
        return num if math.isfinite(num) else None
    return None


def is_finite_number(value: Any) -> bool:
    return raw_kind(value) is RawKind.NUMBER and math.isfinite(float(value))


def number_label(num: float) -> str:
    # "05" -> "5", "2.50" -> "2.5", "1e3" -> "1000"
    if float(num).is_integer():
        return str(int(num))
    return repr(float(num))


def display_text(value: Any) -> str:
    """
    Text for values nothing else knows how to render.
    Booleans and non-finite numbers read as they do in the browser.
    """
    kind = raw_kind(value)
    if kind is RawKind.BOOL:
        return "true" if value else "false"
    if kind is RawKind.NUMBER and not math.isfinite(float(value)):
        num = float(value)
        if math.isnan(num):
            return "NaN"
        return "Infinity" if num > 0 else "-Infinity"
    return str(value)
