from datetime import date

import pytest

from db import models
from services.ledger import (
    DEFAULT_CATEGORIES,
    add_category,
    add_transaction,
    current_balance,
    dashboard_summary,
    delete_category,
    delete_transaction,
    ensure_default_categories,
    list_categories,
    list_transactions,
    transaction_feed,
    update_category,
    update_transaction,
)
from services.user_settings import set_extra_balance


def test_default_categories_are_idempotent(session):
    assert ensure_default_categories(session) == len(DEFAULT_CATEGORIES)
    assert ensure_default_categories(session) == 0
    assert len(list_categories(session, type="income")) == 3


def test_add_category_validates_type(session):
    with pytest.raises(ValueError):
        add_category(session, "Odd", "transfer")


def test_add_transaction_takes_type_from_category(session):
    salary = add_category(session, "Salary", "income")
    tx = add_transaction(session, salary.id, 2500, " Payday ", date(2026, 4, 5), "transfer")

    assert tx.type == "income"
    assert tx.description == "Payday"


def test_add_transaction_rejects_bad_input(session):
    food = add_category(session, "Food", "expense")
    with pytest.raises(ValueError):
        add_transaction(session, food.id, 0, "free lunch", date(2026, 4, 5))
    with pytest.raises(ValueError):
        add_transaction(session, 999, 10, "ghost", date(2026, 4, 5))
    with pytest.raises(ValueError):
        add_transaction(session, food.id, 10, "barter", date(2026, 4, 5), "barter")


def test_current_balance_includes_extra_balances(session):
    salary = add_category(session, "Salary", "income")
    food = add_category(session, "Food", "expense")
    add_transaction(session, salary.id, 1000, "pay", date(2026, 4, 1))
    add_transaction(session, food.id, 250.5, "groceries", date(2026, 4, 2))
    set_extra_balance(session, "bonus", 100)

    assert current_balance(session) == pytest.approx(849.5)


def test_transaction_feed_filters_by_date(session):
    food = add_category(session, "Food", "expense")
    add_transaction(session, food.id, 10, "old", date(2025, 1, 1))
    add_transaction(session, food.id, 20, "new", date(2026, 4, 1))

    feed = transaction_feed(session, since=date(2026, 1, 1))
    assert [t.amount for t in feed] == [20.0]
    assert feed[0].type == "expense"
    assert len(list_transactions(session)) == 2
    assert session.query(models.Transaction).count() == 2


def test_update_transaction_follows_new_category(session):
    food = add_category(session, "Food", "expense")
    salary = add_category(session, "Salary", "income")
    tx = add_transaction(session, food.id, 30, "lunch", date(2026, 4, 5))

    updated = update_transaction(session, tx.id, category_id=salary.id, amount=45, on=date(2026, 4, 6), payment_method="pix")

    assert updated.type == "income"
    assert updated.amount == 45.0
    assert updated.date == date(2026, 4, 6)
    assert updated.payment_method == "pix"
    assert updated.description == "lunch"
    assert current_balance(session) == pytest.approx(45.0)


def test_update_transaction_validates_and_handles_missing(session):
    food = add_category(session, "Food", "expense")
    tx = add_transaction(session, food.id, 30, "lunch", date(2026, 4, 5))
    with pytest.raises(ValueError):
        update_transaction(session, tx.id, amount=-1)
    with pytest.raises(ValueError):
        update_transaction(session, tx.id, payment_method="barter")
    with pytest.raises(ValueError):
        update_transaction(session, tx.id, category_id=999)
    assert update_transaction(session, 404, amount=10) is None


def test_delete_transaction(session):
    food = add_category(session, "Food", "expense")
    tx = add_transaction(session, food.id, 30, "lunch", date(2026, 4, 5))

    assert delete_transaction(session, tx.id) is True
    assert list_transactions(session) == []
    assert delete_transaction(session, tx.id) is False


def test_update_and_delete_category(session):
    food = add_category(session, "Food", "expense")
    misc = add_category(session, "Misc", "expense")
    add_transaction(session, food.id, 30, "lunch", date(2026, 4, 5))

    renamed = update_category(session, misc.id, name="Gifts", type="income", color="#000000")
    assert (renamed.name, renamed.type, renamed.color) == ("Gifts", "income", "#000000")
    with pytest.raises(ValueError):
        update_category(session, misc.id, type="transfer")
    assert update_category(session, 404, name="x") is None

    with pytest.raises(ValueError):
        delete_category(session, food.id)
    assert delete_category(session, misc.id) is True
    assert delete_category(session, misc.id) is False
    assert [c.name for c in list_categories(session)] == ["Food"]


def test_list_transactions_filters_by_month_and_category(session):
    food = add_category(session, "Food", "expense")
    transport = add_category(session, "Transport", "expense")
    add_transaction(session, food.id, 10, "march", date(2026, 3, 31))
    add_transaction(session, food.id, 20, "april", date(2026, 4, 1))
    add_transaction(session, transport.id, 5, "bus", date(2026, 4, 30))

    april = list_transactions(session, month=4, year=2026)
    assert [t.description for t in april] == ["bus", "april"]
    assert [t.description for t in list_transactions(session, month=4, year=2026, category_id=food.id)] == ["april"]
    # month without a year does not filter
    assert len(list_transactions(session, month=4)) == 3
    with pytest.raises(ValueError):
        list_transactions(session, month=13, year=2026)


def test_dashboard_summary_for_month(session):
    salary = add_category(session, "Salary", "income")
    names = ["Food", "Transport", "Housing", "Health", "Leisure", "Shopping"]
    cats = {name: add_category(session, name, "expense") for name in names}
    add_transaction(session, salary.id, 3000, "pay", date(2026, 4, 5))
    for amount, name in zip([400, 150, 1200, 80, 60, 20], names):
        add_transaction(session, cats[name].id, amount, name.lower(), date(2026, 4, 10))
    add_transaction(session, cats["Food"].id, 100, "dinner", date(2026, 4, 20))
    add_transaction(session, cats["Food"].id, 999, "last month", date(2026, 3, 15))

    summary = dashboard_summary(session, month=4, year=2026)

    assert summary["total_income"] == 3000.0
    assert summary["total_expenses"] == 2010.0
    assert summary["balance"] == 990.0
    assert summary["transaction_count"] == 8
    assert summary["top_categories"] == [
        {"category": "Salary", "amount": 3000.0, "count": 1},
        {"category": "Housing", "amount": 1200.0, "count": 1},
        {"category": "Food", "amount": 500.0, "count": 2},
        {"category": "Transport", "amount": 150.0, "count": 1},
        {"category": "Health", "amount": 80.0, "count": 1},
    ]


def test_dashboard_summary_without_data_is_zero(session):
    summary = dashboard_summary(session, month=1, year=2020)
    assert summary == {
        "total_income": 0.0,
        "total_expenses": 0.0,
        "balance": 0.0,
        "transaction_count": 0,
        "top_categories": [],
    }


def test_dashboard_summary_without_filter_covers_everything(session):
    food = add_category(session, "Food", "expense")
    add_transaction(session, food.id, 10, "a", date(2025, 1, 1))
    add_transaction(session, food.id, 20, "b", date(2026, 4, 1))

    summary = dashboard_summary(session)
    assert summary["transaction_count"] == 2
    assert summary["balance"] == -30.0
    assert summary["top_categories"] == [{"category": "Food", "amount": 30.0, "count": 2}]
