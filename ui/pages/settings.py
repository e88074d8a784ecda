from __future__ import annotations

import streamlit as st

from services.demo_loader import load_demo_data
from services.ledger import delete_category, ensure_default_categories, list_categories, update_category
from services.user_settings import (
    EXTRA_BALANCE_TYPES,
    adjust_extra_balance,
    extra_balances,
    get_or_create_user_settings,
    save_user_settings,
    set_extra_balance,
)


def render(session):
    st.header("Settings & Data")

    st.subheader("Personal Profile")
    profile = get_or_create_user_settings(session)
    with st.form("profile_form"):
        user_name = st.text_input("Display name", value=profile.user_name)
        submitted = st.form_submit_button("Save profile", type="primary")
    if submitted:
        updated = save_user_settings(session, user_name=user_name)
        st.success(f"Saved profile for {updated.user_name}")

    st.divider()
    st.subheader("Extra Balances")
    st.caption("Money held outside tracked transactions; added to the current balance used by the forecast.")
    balances = extra_balances(session)
    for kind in EXTRA_BALANCE_TYPES:
        c1, c2, c3, c4, c5 = st.columns([2, 2, 1, 1, 1])
        c1.metric(kind.title(), f"{balances[kind]:,.2f}")
        value = c2.number_input(f"Set {kind}", min_value=0.0, value=balances[kind], step=10.0, key=f"set_{kind}")
        if c3.button("Save", key=f"save_{kind}"):
            set_extra_balance(session, kind, value)
            st.rerun()
        if c4.button("-100", key=f"minus_{kind}", disabled=balances[kind] < 100):
            adjust_extra_balance(session, kind, -100)
            st.rerun()
        if c5.button("+100", key=f"plus_{kind}"):
            adjust_extra_balance(session, kind, 100)
            st.rerun()
    st.metric("Total extra balance", f"{get_or_create_user_settings(session).total_extra_balance:,.2f}")

    st.divider()
    st.subheader("Categories")
    categories = list_categories(session)
    if categories:
        by_label = {f"{c.name} ({c.type})": c for c in categories}
        k1, k2, k3 = st.columns(3)
        category = by_label[k1.selectbox("Category", list(by_label.keys()))]
        new_name = k2.text_input("Name", value=category.name, key=f"cat_name_{category.id}")
        new_color = k3.color_picker("Color", value=category.color, key=f"cat_color_{category.id}")
        b1, b2 = st.columns(2)
        if b1.button("Update category"):
            try:
                update_category(session, category.id, name=new_name, color=new_color)
                st.rerun()
            except ValueError as exc:
                st.error(str(exc))
        if b2.button("Delete category"):
            try:
                delete_category(session, category.id)
                st.rerun()
            except ValueError as exc:
                st.error(str(exc))

    st.divider()
    st.subheader("Data")
    c1, c2 = st.columns(2)
    if c1.button("Create default categories"):
        created = ensure_default_categories(session)
        st.success(f"Created {created} categories")
    if c2.button("Load demo data"):
        try:
            result = load_demo_data(session)
            st.success(f"Loaded {result['transactions_loaded']} transactions; {result['recurring_total']} recurring rules")
        except Exception as exc:
            st.error(f"Demo load failed: {exc}")
