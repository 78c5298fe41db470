from __future__ import annotations
import logging
import os
from collections.abc import Mapping
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, ValidationError, field_validator

from .formatting import FormatContext

ENV_PREFIX = "BACKTEST_REVIEW_"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


class ReviewSettings(BaseModel):
    log_level: str = "INFO"
    trades_preview_limit: int = Field(default=10, ge=1)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    currency_symbol: str = "$"
    date_label_format: str = "%b %d, %Y"
    datetime_format: str = "%m/%d/%Y, %I:%M:%S %p"
    timezone: str = "UTC"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"unknown log level {v!r}")
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {v!r}") from exc
        return v

    def format_context(self) -> FormatContext:
        return FormatContext(
            currency_symbol=self.currency_symbol,
            date_label_format=self.date_label_format,
            datetime_format=self.datetime_format,
            timezone=self.timezone,
        )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ReviewSettings:
    """
    Read BACKTEST_REVIEW_* variables. Unset or blank variables keep defaults.
    """
    env = os.environ if environ is None else environ
    raw = {}
    for name in ReviewSettings.model_fields:
        value = env.get(ENV_PREFIX + name.upper())
        if value is not None and value.strip():
            raw[name] = value.strip()
    try:
        return ReviewSettings(**raw)
    except ValidationError as exc:
        problems = "; ".join(
            f"{ENV_PREFIX}{str(err['loc'][0]).upper()}: {err['msg']}" for err in exc.errors()
        )
        raise ConfigError(problems) from exc


def configure_logging(level: str = "INFO") -> None:
    global _configured
    if not _configured:
        logging.basicConfig(level=level, format=LOG_FORMAT)
        _configured = True
    logging.getLogger("backtest_review").setLevel(level)
