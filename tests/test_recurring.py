from datetime import date

import pytest

from db import models
from services.ledger import add_category
from services.recurring import (
    add_recurring,
    delete_recurring,
    execute_recurring,
    list_recurring,
    pending_recurring,
    process_due_recurring,
    recurring_feed,
    set_recurring_active,
    update_recurring,
)


def _categories(session):
    return add_category(session, "Salary", "income"), add_category(session, "Housing", "expense")


def test_add_recurring_validates(session):
    _, housing = _categories(session)
    with pytest.raises(ValueError):
        add_recurring(session, housing.id, 100, "Rent", "daily", date(2026, 4, 1))
    with pytest.raises(ValueError):
        add_recurring(session, housing.id, -5, "Rent", "monthly", date(2026, 4, 1))


def test_pending_only_lists_active_due_rules(session):
    salary, housing = _categories(session)
    rent = add_recurring(session, housing.id, 1500, "Rent", "monthly", date(2026, 4, 1))
    add_recurring(session, salary.id, 4000, "Salary", "monthly", date(2026, 4, 20))
    gym = add_recurring(session, housing.id, 40, "Gym", "monthly", date(2026, 3, 28))
    set_recurring_active(session, gym.id, False)

    pending = pending_recurring(session, today=date(2026, 4, 10))
    assert [r.id for r in pending] == [rent.id]


def test_execute_books_transaction_and_advances_anchor(session):
    _, housing = _categories(session)
    rent = add_recurring(session, housing.id, 1500, "Rent", "monthly", date(2026, 1, 31))

    tx, next_date = execute_recurring(session, rent.id, today=date(2026, 2, 2))

    assert tx.type == "expense"
    assert tx.date == date(2026, 2, 2)
    assert tx.payment_method == "transfer"
    assert next_date == date(2026, 3, 3)
    assert session.get(models.RecurringTransaction, rent.id).next_date == date(2026, 3, 3)


def test_execute_inactive_or_missing_rule_raises(session):
    salary, _ = _categories(session)
    rule = add_recurring(session, salary.id, 100, "Side gig", "weekly", date(2026, 4, 1))
    set_recurring_active(session, rule.id, False)
    with pytest.raises(ValueError):
        execute_recurring(session, rule.id, today=date(2026, 4, 1))
    with pytest.raises(ValueError):
        execute_recurring(session, 404, today=date(2026, 4, 1))


def test_process_due_recurring_books_each_pending_rule_once(session):
    salary, housing = _categories(session)
    add_recurring(session, housing.id, 1500, "Rent", "monthly", date(2026, 4, 1))
    add_recurring(session, salary.id, 200, "Allowance", "weekly", date(2026, 3, 20))

    assert process_due_recurring(session, today=date(2026, 4, 2)) == 2
    assert session.query(models.Transaction).count() == 2
    assert process_due_recurring(session, today=date(2026, 4, 2)) == 1  # weekly rule is still behind


def test_recurring_feed_carries_category_type(session):
    salary, housing = _categories(session)
    add_recurring(session, salary.id, 4000, "Salary", "monthly", date(2026, 4, 5))
    add_recurring(session, housing.id, 1500, "Rent", "monthly", date(2026, 4, 10))

    feed = recurring_feed(session)
    assert [(r.category_type, r.amount) for r in feed] == [("income", 4000.0), ("expense", 1500.0)]
    assert len(list_recurring(session, active_only=True)) == 2


def test_update_recurring_changes_fields_and_feed(session):
    salary, housing = _categories(session)
    rule = add_recurring(session, housing.id, 1500, "Rent", "monthly", date(2026, 4, 1))

    updated = update_recurring(
        session, rule.id, category_id=salary.id, amount=1600, description=" Sublet ", frequency="weekly", next_date=date(2026, 4, 8)
    )

    assert updated.amount == 1600.0
    assert updated.description == "Sublet"
    assert updated.frequency == "weekly"
    assert updated.next_date == date(2026, 4, 8)
    assert [r.category_type for r in recurring_feed(session)] == ["income"]

    update_recurring(session, rule.id, is_active=False)
    assert recurring_feed(session) == []


def test_update_recurring_validates_and_handles_missing(session):
    _, housing = _categories(session)
    rule = add_recurring(session, housing.id, 1500, "Rent", "monthly", date(2026, 4, 1))
    with pytest.raises(ValueError):
        update_recurring(session, rule.id, frequency="daily")
    with pytest.raises(ValueError):
        update_recurring(session, rule.id, amount=0)
    with pytest.raises(ValueError):
        update_recurring(session, rule.id, category_id=999)
    assert update_recurring(session, 404, amount=10) is None


def test_delete_recurring(session):
    _, housing = _categories(session)
    rule = add_recurring(session, housing.id, 1500, "Rent", "monthly", date(2026, 4, 1))

    assert delete_recurring(session, rule.id) is True
    assert list_recurring(session) == []
    assert delete_recurring(session, rule.id) is False
