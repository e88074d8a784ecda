from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from schemas.domain import RECURRING_FREQUENCIES
from services.ledger import list_categories
from services.recurring import (
    add_recurring,
    delete_recurring,
    execute_recurring,
    list_recurring,
    pending_recurring,
    set_recurring_active,
    update_recurring,
)


def render(session):
    st.header("Recurring Transactions")

    pending = pending_recurring(session)
    if pending:
        with st.container(border=True):
            st.subheader(f"⏰ {len(pending)} pending recurring transaction(s)")
            for rule in pending:
                c1, c2 = st.columns([4, 1])
                c1.write(f"{rule.description or rule.category.name}: {rule.amount:,.2f} (due {rule.next_date.isoformat()})")
                if c2.button("Execute", key=f"exec_{rule.id}"):
                    _, next_date = execute_recurring(session, rule.id)
                    st.success(f"Booked. Next due {next_date.isoformat()}")
                    st.rerun()

    categories = list_categories(session)
    by_label = {f"{c.name} ({c.type})": c.id for c in categories}
    with st.container(border=True):
        st.subheader("Add Recurring Transaction")
        c1, c2, c3, c4 = st.columns(4)
        category_label = c1.selectbox("Category", list(by_label.keys()))
        amount = c2.number_input("Amount", min_value=0.0, step=10.0)
        frequency = c3.selectbox("Frequency", RECURRING_FREQUENCIES, index=1)
        next_date = c4.date_input("Next date", value=date.today())
        description = st.text_input("Description")
        if st.button("Save Recurring", type="primary") and category_label:
            try:
                add_recurring(session, by_label[category_label], amount, description, frequency, next_date)
                st.success("Recurring transaction saved")
            except ValueError as exc:
                st.error(str(exc))

    rules = list_recurring(session)
    if not rules:
        st.caption("No recurring transactions.")
        return

    st.dataframe(
        pd.DataFrame(
            [
                {
                    "id": r.id,
                    "description": r.description,
                    "category": r.category.name,
                    "type": r.category.type,
                    "amount": r.amount,
                    "frequency": r.frequency,
                    "next_date": r.next_date,
                    "active": r.is_active,
                }
                for r in rules
            ]
        ),
        use_container_width=True,
    )
    c1, c2, c3 = st.columns(3)
    target = c1.selectbox("Rule", [r.id for r in rules])
    rule = next(r for r in rules if r.id == target)
    if c2.button("Toggle active"):
        set_recurring_active(session, rule.id, not rule.is_active)
        st.rerun()
    if c3.button("Delete rule"):
        delete_recurring(session, rule.id)
        st.rerun()

    with st.expander("Edit rule"):
        e1, e2, e3 = st.columns(3)
        new_amount = e1.number_input("Amount", min_value=0.0, value=float(rule.amount), step=10.0, key=f"rec_amt_{rule.id}")
        new_frequency = e2.selectbox(
            "Frequency", RECURRING_FREQUENCIES, index=RECURRING_FREQUENCIES.index(rule.frequency), key=f"rec_freq_{rule.id}"
        )
        new_next = e3.date_input("Next date", value=rule.next_date, key=f"rec_next_{rule.id}")
        new_description = st.text_input("Description", value=rule.description, key=f"rec_desc_{rule.id}")
        if st.button("Update rule", key=f"rec_update_{rule.id}"):
            try:
                update_recurring(
                    session, rule.id, amount=new_amount, description=new_description, frequency=new_frequency, next_date=new_next
                )
                st.rerun()
            except ValueError as exc:
                st.error(str(exc))
