from __future__ import annotations

import logging

import streamlit as st

from db.engine import SessionLocal, init_db
from services.scheduler import start_local_scheduler
from services.user_settings import get_or_create_user_settings
from ui.pages import dashboard, forecast, recurring, settings, transactions

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(page_title="CashCast", layout="wide")

init_db()

PAGES = {
    "Dashboard": dashboard.render,
    "Cash Flow Forecast": forecast.render,
    "Transactions": transactions.render,
    "Recurring": recurring.render,
    "Settings": settings.render,
}


@st.cache_resource
def get_session():
    return SessionLocal()


@st.cache_resource
def get_scheduler():
    return start_local_scheduler(SessionLocal)


def main():
    st.title("CashCast")
    session = get_session()
    profile = get_or_create_user_settings(session)

    scheduler = get_scheduler()

    st.caption(f"Personal cash-flow tracker for {profile.user_name}")
    st.sidebar.success(f"⏱️ Recurring processor active: {scheduler.running}")

    page = st.sidebar.radio("Navigate", list(PAGES.keys()))
    PAGES[page](session)


if __name__ == "__main__":
    main()
