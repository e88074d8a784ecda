from __future__ import annotations

from datetime import date

import streamlit as st

from config import DEFAULT_FORECAST_DAYS, FORECAST_HORIZON_CHOICES
from services.forecasting import build_cash_flow_forecast, forecast_to_frame, summarize_forecast
from services.scenarios import apply_scenarios, estimate_total_impact, new_scenario

_SCENARIO_KEY = "forecast_scenarios"


def _scenario_editor() -> list:
    scenarios = st.session_state.setdefault(_SCENARIO_KEY, [])

    with st.expander("🎯 Simulate future scenarios", expanded=bool(scenarios)):
        with st.form("scenario_form", clear_on_submit=True):
            description = st.text_input("Description", placeholder="e.g. Annual bonus")
            c1, c2 = st.columns(2)
            amount = c1.number_input("Amount", min_value=0.0, value=0.0, step=10.0)
            kind = c2.selectbox("Type", ["expense", "income"])
            c3, c4 = st.columns(2)
            frequency = c3.selectbox("Frequency", ["once", "weekly", "monthly"])
            on = c4.date_input("Date", value=date.today())
            submitted = st.form_submit_button("Add scenario")
        if submitted:
            if not description.strip() or amount <= 0:
                st.warning("A scenario needs a description and a positive amount.")
            else:
                scenarios.append(new_scenario(description, amount, kind, on, frequency))

        for scenario in list(scenarios):
            c1, c2 = st.columns([5, 1])
            sign = "+" if scenario.type == "income" else "-"
            c1.write(f"{scenario.description} ({scenario.frequency}) {sign}{scenario.amount:,.2f} from {scenario.date.isoformat()}")
            if c2.button("Remove", key=f"rm_{scenario.id}"):
                scenarios.remove(scenario)
                st.rerun()

        if scenarios:
            st.metric("Estimated 30-day impact", f"{estimate_total_impact(scenarios):+,.2f}")
            if st.button("Clear scenarios"):
                scenarios.clear()
                st.rerun()

    return scenarios


def render(session):
    st.header("Cash Flow Forecast")
    st.caption("Projection from recent transaction history and active recurring transactions.")

    c1, c2 = st.columns(2)
    horizon_days = c1.selectbox(
        "Horizon (days)",
        FORECAST_HORIZON_CHOICES,
        index=FORECAST_HORIZON_CHOICES.index(DEFAULT_FORECAST_DAYS),
    )
    include_recurring = c2.checkbox("Include recurring", value=True)

    response = build_cash_flow_forecast(session, horizon_days=int(horizon_days), include_recurring=include_recurring)
    if not response.forecast:
        st.error("The cash flow forecast could not be computed from the stored data.")
        return

    scenarios = _scenario_editor()
    series = apply_scenarios(response.forecast, scenarios) if scenarios else response.forecast
    summary = summarize_forecast(series, response.current_balance, int(horizon_days))

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Current balance", f"{summary.current_balance:,.2f}")
    m2.metric(
        "Projected balance",
        f"{summary.projected_balance:,.2f}",
        delta=f"{summary.projected_balance - summary.current_balance:+,.2f}",
    )
    m3.metric("Lowest balance", f"{summary.lowest_balance:,.2f}")
    m4.metric("Avg daily change", f"{summary.average_daily_change:+,.2f}")

    if summary.days_until_negative is not None:
        st.warning(f"⚠️ Balance turns negative in {summary.days_until_negative} day(s).")

    frame = forecast_to_frame(series)
    st.line_chart(frame.set_index("date")[["balance"]])

    st.caption(
        f"Based on {response.analysis.total_transactions} transactions and "
        f"{response.analysis.recurring_count} recurring rule(s)."
    )
    with st.expander("Forecast detail", expanded=False):
        st.dataframe(frame, use_container_width=True)
