from __future__ import annotations
import json
from pathlib import Path

import streamlit as st

from backtest_review.charts import equity_figure, drawdown_figure, duration_figure, metric_card_html
from backtest_review.config import load_settings, configure_logging
from backtest_review.review import build_review
from backtest_review.trades import table_frame, pnl_colors

TONE_COLORS = {"pos": "#16a34a", "neg": "#dc2626", None: "#0f172a"}

settings = load_settings()
configure_logging(settings.log_level)
ctx = settings.format_context()

st.set_page_config(page_title="Backtest Review", layout="wide")

with st.sidebar:
    st.header("Backtest detail")
    uploaded = st.file_uploader("Detail JSON", type=["json"])
    path = st.text_input("...or a path on disk", "")
    limit = st.slider("Trades in preview", 1, 50, settings.trades_preview_limit, 1)

raw_text = None
if uploaded is not None:
    raw_text = uploaded.getvalue().decode("utf-8", errors="replace")
elif path:
    try:
        raw_text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        st.error(f"Could not read {path}: {exc}")
        st.stop()

if raw_text is None:
    st.info("Upload a backtest detail JSON to review it.")
    st.stop()

try:
    detail = json.loads(raw_text)
except json.JSONDecodeError as exc:
    st.error(f"Not valid JSON: {exc}")
    st.stop()

if not isinstance(detail, dict):
    st.error("Expected a JSON object at the top level.")
    st.stop()

review = build_review(detail, ctx, trades_limit=limit)

# Header
h = review.header
st.title(h.title)
cap = f"Created {h.created} · status **:{'green' if h.status_tone == 'pos' else 'red' if h.status_tone == 'neg' else 'gray'}[{h.status or 'unknown'}]**"
if h.saved:
    cap += f" · saved {h.saved}"
st.markdown(cap)

# Strategy settings
s = review.strategy
with st.expander("Strategy settings", expanded=True):
    c1, c2 = st.columns(2)
    if s.starting_balance:
        c1.metric("Starting balance", s.starting_balance)
    if s.per_trade_usd:
        c2.metric("Per trade USD", s.per_trade_usd)
    if s.selected_symbols:
        st.caption(f"Selected symbols ({len(s.selected_symbols)})")
        st.write(", ".join(s.selected_symbols))
    if s.participated_symbols:
        st.caption(f"Participated symbols ({len(s.participated_symbols)})")
        st.write(", ".join(s.participated_symbols))

    for col, side in zip(st.columns(2), (s.long, s.short)):
        with col:
            name = side.side.capitalize()
            st.subheader(f"{name} entry (offset: {side.offset})")
            if not side.enabled:
                st.markdown(f":red[{name} trading disabled]")
                continue
            if side.entry_text:
                st.write(side.entry_text)
            st.code(side.condition_code or f"Not trading {side.side}", language="python")
            if side.exit is None:
                st.caption(f"No {side.side} exit configuration.")
                continue
            lines = [f"- Type: {side.exit.type}"]
            if side.exit.atr_period is not None:
                lines.append(f"- ATR Period: {side.exit.atr_period}")
            if side.exit.take_profit is not None:
                lines.append(f"- {side.exit.take_profit_label}: {side.exit.take_profit}")
            if side.exit.stop_loss is not None:
                lines.append(f"- {side.exit.stop_loss_label}: {side.exit.stop_loss}")
            st.markdown("\n".join(lines))

# Trades
with st.expander(f"Last {limit} trades"):
    if review.trades.rows:
        frame = table_frame(review.trades)
        colors = pnl_colors(review.trades)
        st.dataframe(frame.style.apply(lambda _: colors, axis=None), use_container_width=True)
    else:
        st.info("No trades found.")

# Headline + equity
for col, m in zip(st.columns(len(review.headline)), review.headline):
    col.markdown(metric_card_html(m.label, m.value, TONE_COLORS[m.tone], size=24), unsafe_allow_html=True)

st.subheader("Equity curve")
if review.equity.values:
    st.plotly_chart(equity_figure(review.equity), use_container_width=True)
    st.caption(f"{review.equity_first_label} → {review.equity_last_label}")
else:
    st.info("No data")

# Metric groups
st.subheader("Results summary")
if not review.groups:
    st.info("No summary metrics available.")
for g in review.groups:
    st.markdown(f"**{g.group}**")
    cols = st.columns(4)
    for i, item in enumerate(g.items):
        color = TONE_COLORS["neg"] if item.negative else TONE_COLORS[None]
        cols[i % 4].markdown(metric_card_html(item.label, item.value, color, unit=item.unit), unsafe_allow_html=True)

c1, c2 = st.columns(2)
with c1:
    st.subheader("Drawdown")
    if review.drawdown.values:
        st.plotly_chart(drawdown_figure(review.drawdown), use_container_width=True)
        st.caption("Values in %")
    else:
        st.info("No data")
with c2:
    st.subheader("Trade duration distribution")
    if review.trade_duration.values:
        st.plotly_chart(duration_figure(review.trade_duration), use_container_width=True)
    else:
        st.info("No data")
