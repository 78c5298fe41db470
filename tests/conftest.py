"""Shared fixtures: a backtest detail payload shaped like the backend's."""

from __future__ import annotations

import copy

import pytest

DETAIL = {
    "id": 42,
    "backtest_name": "RSI dip buyer",
    "status": "completed",
    "created_at": "2024-03-01T14:05:00",
    "saved_at_utc": None,
    "config": {
        "saved_at_utc": "2024-03-01T14:00:00",
        "starting_balance": "5,000",
        "usd_per_trade": 250,
        "selected_symbols": ["AAPL", "MSFT", 7],
        "long_enabled": True,
        "short_enabled": False,
        "long_config": {
            "entry_explanation_long": "Buy when RSI < 30",
            "exit_type_position_long": "atr",
            "atr_config_long": {"period": 14},
            "tp_long": 2,
            "sl_long": 1.5,
        },
        "short_config": {
            "exit_type_position_short": "percentage",
            "tp_short": 5,
        },
        "ai_entry": {
            "condition_code_long": "  df['rsi'] < 30  ",
            "offset_long": 1,
        },
    },
    "summary_metrics": {
        "Number_of_Trades": 12,
        "final_pnl": 340.25,
        "Annualized_Return": 0.18,
        "Maximum_Drawdown": -0.15,
        "Initial_Balance": 10000,
        "Sharpe_Ratio": 1.25,
        "CAGR": 0.2,
        "Per_Trade_USD": 500,
        "Exposure_Bars": 118,
        "Trade_Duration_Distribution": {"10": 3, "2": 5, "1": 1},
    },
    "equity_curve": [
        {"date": "2024-01-02", "balance": 10000},
        {"date": "2024-01-03", "balance": 10120.5},
        {"date": "2024-01-04", "balance": 10340.25},
    ],
    "drawdown_curve": [0, -0.05, -0.15],
    "trades_columns": ["Symbol", "Entry_Date", "Position_Status", "PNL", "internal_id"],
    "trades_preview": [
        {"Symbol": "AAPL", "Entry_Date": "2024-01-02 09:30:00", "Position_Status": "LONG_POS", "PNL": 120.5, "internal_id": 1},
        {"Symbol": "MSFT", "Entry_Date": "2024-01-03 09:30:00", "Position_Status": "SHORT_POS", "PNL": "-20.25", "internal_id": 2},
    ],
    "participated_symbols": ["AAPL", "MSFT"],
    "entry_text_long": None,
    "entry_text_short": None,
}


@pytest.fixture
def detail():
    return copy.deepcopy(DETAIL)


@pytest.fixture
def summary(detail):
    return detail["summary_metrics"]
