from __future__ import annotations

from datetime import date

import pandas as pd
import streamlit as st

from schemas.domain import PAYMENT_METHODS
from services.ledger import (
    add_transaction,
    current_balance,
    delete_transaction,
    list_categories,
    list_transactions,
    update_transaction,
)


def render(session):
    st.header("Transactions")

    categories = list_categories(session)
    if not categories:
        st.info("No categories yet. Load the defaults from Settings.")
        return

    by_label = {f"{c.name} ({c.type})": c.id for c in categories}
    with st.container(border=True):
        st.subheader("Add Transaction")
        c1, c2, c3 = st.columns(3)
        category_label = c1.selectbox("Category", list(by_label.keys()))
        amount = c2.number_input("Amount", min_value=0.0, step=1.0)
        on = c3.date_input("Date", value=date.today())
        c4, c5 = st.columns(2)
        description = c4.text_input("Description")
        payment_method = c5.selectbox("Payment method", PAYMENT_METHODS)
        if st.button("Save Transaction", type="primary"):
            try:
                add_transaction(session, by_label[category_label], amount, description, on, payment_method)
                st.success("Transaction saved")
            except ValueError as exc:
                st.error(str(exc))

    st.metric("Current balance", f"{current_balance(session):,.2f}")

    today = date.today()
    f1, f2, f3, f4 = st.columns(4)
    by_month = f1.checkbox("Filter by month")
    month = f2.selectbox("Month", list(range(1, 13)), index=today.month - 1, disabled=not by_month)
    year = f3.number_input("Year", min_value=2000, max_value=2100, value=today.year, step=1, disabled=not by_month)
    filter_label = f4.selectbox("Category filter", ["All"] + list(by_label.keys()))

    txs = list_transactions(
        session,
        month=month if by_month else None,
        year=int(year) if by_month else None,
        category_id=by_label.get(filter_label),
    )
    if not txs:
        st.caption("No transactions recorded.")
        return
    df = pd.DataFrame(
        [
            {
                "id": t.id,
                "date": t.date,
                "description": t.description,
                "category": t.category.name if t.category else None,
                "type": t.type,
                "amount": t.amount,
                "payment_method": t.payment_method,
            }
            for t in txs
        ]
    )
    st.dataframe(df, use_container_width=True)

    with st.expander("Edit or delete a transaction"):
        target = st.selectbox("Transaction", [t.id for t in txs], format_func=lambda i: f"#{i}")
        tx = next(t for t in txs if t.id == target)
        labels = list(by_label.keys())
        current_label = next((label for label, cid in by_label.items() if cid == tx.category_id), labels[0])
        e1, e2, e3 = st.columns(3)
        new_label = e1.selectbox("Category", labels, index=labels.index(current_label), key=f"edit_cat_{tx.id}")
        new_amount = e2.number_input("Amount", min_value=0.0, value=float(tx.amount), step=1.0, key=f"edit_amt_{tx.id}")
        new_date = e3.date_input("Date", value=tx.date, key=f"edit_date_{tx.id}")
        new_description = st.text_input("Description", value=tx.description, key=f"edit_desc_{tx.id}")
        b1, b2 = st.columns(2)
        if b1.button("Update", key=f"update_{tx.id}"):
            try:
                update_transaction(
                    session, tx.id, category_id=by_label[new_label], amount=new_amount, description=new_description, on=new_date
                )
                st.rerun()
            except ValueError as exc:
                st.error(str(exc))
        if b2.button("Delete", key=f"delete_{tx.id}"):
            delete_transaction(session, tx.id)
            st.rerun()
