from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from services.ledger import current_balance, dashboard_summary


def render(session):
    st.header("Dashboard")

    today = date.today()
    c1, c2, c3 = st.columns(3)
    whole_history = c1.checkbox("All time", value=False)
    month = c2.selectbox("Month", list(range(1, 13)), index=today.month - 1, disabled=whole_history)
    year = c3.number_input("Year", min_value=2000, max_value=2100, value=today.year, step=1, disabled=whole_history)

    summary = dashboard_summary(session) if whole_history else dashboard_summary(session, month=month, year=int(year))

    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Income", f"{summary['total_income']:,.2f}")
    m2.metric("Expenses", f"{summary['total_expenses']:,.2f}")
    m3.metric("Net", f"{summary['balance']:,.2f}")
    m4.metric("Transactions", summary["transaction_count"])
    st.caption(f"Current balance including extra balances: {current_balance(session):,.2f}")

    if not summary["top_categories"]:
        st.info("No transactions in this period.")
        return

    st.subheader("Top categories")
    top = pd.DataFrame(summary["top_categories"])
    st.bar_chart(top.set_index("category")["amount"])
    st.dataframe(top, use_container_width=True)
