"""Unit tests for metric classification, grouping and headline numbers."""

import pytest

from backtest_review.metrics import (
    METRIC_GROUPS,
    OTHER_EXCLUDE,
    classify_metric,
    format_metric_value,
    build_metric_groups,
    build_headline_metrics,
)
from backtest_review.schemas import FormattedValue


def _fv(key, value):
    fv = format_metric_value(key, value)
    return fv.formatted, fv.negative


def test_currency_negative_pnl():
    assert format_metric_value("final_pnl", -250.5) == FormattedValue(formatted="-$250.50", negative=True)


def test_percent_scales_fractions_only():
    assert _fv("Win_Rate", 0.42) == ("42.00%", False)
    assert _fv("Win_Rate", 42) == ("42.00%", False)


def test_near_zero_squash_is_not_negative():
    assert _fv("Sharpe_Ratio", -3e-12) == ("0", False)


@pytest.mark.parametrize("key, value, expected", [
    ("Anything", None, ("—", False)),
    ("Anything", True, ("Yes", False)),
    ("Loss_Flag", False, ("No", False)),
    ("Strategy_Name", "n/a", ("n/a", False)),
    ("Nested", {"a": 1}, ("{'a': 1}", False)),
    ("Sharpe_Ratio", float("nan"), ("NaN", False)),
    ("Initial_Balance", 10000, ("$10,000.00", False)),
    ("final_balance", "9,876.5", ("$9,876.50", False)),
    ("Average_Profit_per_Trade", -3, ("-$3.00", True)),
    ("Fees_USD", 12.5, ("$12.50", False)),
    ("Max_Drawdown_USD", -500, ("-$500.00", True)),
    ("Total_Return_Profit_%", 12.5, ("12.50%", False)),
    ("Maximum_Drawdown", -0.15, ("-15.00%", True)),
    ("Annualized_Return", 0.18, ("18.00%", False)),
    ("Number_of_Trades", 12, ("12", False)),
    ("number_of_trades", "1,234", ("1,234", False)),
    ("Profit_Factor", 1.5, ("1.5", False)),
    ("Max_Loss_Streak", 4, ("4", False)),
    ("Sortino_Ratio", -0.25, ("-0.25", True)),
])
def test_format_metric_value(key, value, expected):
    assert _fv(key, value) == expected


@pytest.mark.parametrize("key, kind", [
    ("Total_Return_Profit_$", "currency"),
    ("Profit_$", "currency"),
    ("Total_Return_Profit_%", "percent"),
    ("Win_Rate", "percent"),
    ("Number_of_Trades", "count"),
    ("Sharpe_Ratio", "number"),
])
def test_classify_metric(key, kind):
    assert classify_metric(key) == kind


def test_end_to_end_groups_and_headline():
    summary = {"Number_of_Trades": 12, "final_pnl": 340.25, "Annualized_Return": 0.18, "Maximum_Drawdown": -0.15}

    headline = build_headline_metrics(summary)
    assert [(h.label, h.value, h.tone) for h in headline] == [
        ("Total trades", "12", None),
        ("Final PnL", "$340.25", "pos"),
        ("Annualized Return", "18.00%", "pos"),
    ]

    groups = {g.group: g for g in build_metric_groups(summary)}
    risk = groups["Risk & Volatility"]
    assert [(i.label, i.value, i.negative) for i in risk.items] == [("Maximum Drawdown", "-15.00%", True)]


def test_groups_follow_taxonomy_order_not_input_order():
    summary = {"Max_Win_Streak": 3, "Sharpe_Ratio": 1.1, "final_pnl": 5, "Initial_Balance": 100}
    groups = build_metric_groups(summary)
    assert [g.group for g in groups] == ["Balances & Returns", "Risk & Volatility", "Durations & Streaks"]
    assert [i.label for i in groups[0].items] == ["Initial Balance", "Final PnL"]


def test_other_group_filters_hidden_and_excluded_keys():
    summary = {
        "Sharpe_Ratio": 1.2,
        "Custom_Stat": 2,
        "CAGR": 0.1,
        "Equity_Curve": [1, 2, 3],
        "Trade_Duration_Distribution": {"1": 2},
        "Exposure_Rate": 0.5,
    }
    groups = build_metric_groups(summary)
    assert [g.group for g in groups] == ["Risk & Volatility", "Other"]
    assert [(i.label, i.value) for i in groups[-1].items] == [("Custom Stat", "2"), ("Exposure Rate", "50.00%")]


def test_no_other_group_when_nothing_left():
    groups = build_metric_groups({"Win_Rate": 0.5, "CAGR": 0.2, "Equity_Curve": []})
    assert [g.group for g in groups] == ["Trade Stats"]


def test_taxonomy_keys_never_duplicated_into_other():
    summary = {key: 1 for _, keys in METRIC_GROUPS for key in keys}
    summary["Extra_Thing"] = 7
    groups = build_metric_groups(summary)
    labels = [i.label for g in groups for i in g.items]
    assert len(labels) == len(set(labels))
    assert groups[-1].group == "Other"
    assert [i.label for i in groups[-1].items] == ["Extra Thing"]
    # Recovery_Factor is both a taxonomy key and excluded from Other: it shows up once
    assert labels.count("Recovery Factor") == 1
    assert "Recovery_Factor" in OTHER_EXCLUDE


def test_labels_and_units():
    groups = build_metric_groups({"final_pnl": 1, "Average_Profit_per_Trade": 2, "Average_Holding_Period": 6.5})
    items = [i for g in groups for i in g.items]
    assert [i.label for i in items] == ["Final PnL", "Average Profit per Trade", "Average Holding Period"]
    assert items[-1].unit == "Candles"
    assert items[0].unit is None


def test_build_metric_groups_idempotent(summary):
    first = build_metric_groups(summary)
    rebuilt = dict(summary)
    second = build_metric_groups(rebuilt)
    assert first == second
    assert [g.group for g in first] == [g.group for g in second]


@pytest.mark.parametrize("bad", [None, [], "metrics", 3])
def test_build_metric_groups_bad_input(bad):
    assert build_metric_groups(bad) == []


def test_build_metric_groups_does_not_mutate_input(summary):
    before = dict(summary)
    build_metric_groups(summary)
    assert summary == before


def test_headline_fallback_chains():
    headline = build_headline_metrics({"total_trades": "1,500", "final_pnl": None, "Profit_$": -12})
    assert headline[0].value == "1,500"
    assert (headline[1].value, headline[1].tone) == ("-$12.00", "neg")


def test_headline_first_present_wins_even_if_unparseable():
    headline = build_headline_metrics({"final_pnl": "n/a", "Profit_$": 10})
    assert (headline[1].value, headline[1].tone) == ("—", None)


def test_headline_always_three_entries():
    headline = build_headline_metrics({})
    assert len(headline) == 3
    assert all(h.value == "—" and h.tone is None for h in headline)
    assert len(build_headline_metrics(None)) == 3


def test_headline_zero_has_no_tone():
    headline = build_headline_metrics({"final_pnl": 0, "Annualized_Return": -0.05})
    assert (headline[1].value, headline[1].tone) == ("$0.00", None)
    assert (headline[2].value, headline[2].tone) == ("-5.00%", "neg")
