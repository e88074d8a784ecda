from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select

from db import models
from schemas.domain import RECURRING_FREQUENCIES, RecurringRule
from services.recurrence import advance_next_date

logger = logging.getLogger(__name__)


def add_recurring(session, category_id: int, amount: float, description: str, frequency: str, next_date: date):
    if frequency not in RECURRING_FREQUENCIES:
        raise ValueError(f"Unsupported frequency: {frequency}")
    if amount is None or float(amount) <= 0:
        raise ValueError("Amount must be positive")
    if not session.get(models.Category, category_id):
        raise ValueError(f"Category {category_id} not found")

    rule = models.RecurringTransaction(
        category_id=category_id,
        amount=float(amount),
        description=(description or "").strip(),
        frequency=frequency,
        next_date=next_date,
        is_active=True,
    )
    session.add(rule)
    session.commit()
    session.refresh(rule)
    return rule


def list_recurring(session, active_only: bool = False):
    stmt = select(models.RecurringTransaction).order_by(models.RecurringTransaction.next_date, models.RecurringTransaction.id)
    if active_only:
        stmt = stmt.where(models.RecurringTransaction.is_active == True)  # noqa: E712
    return session.scalars(stmt).all()


def set_recurring_active(session, recurring_id: int, active: bool):
    rule = session.get(models.RecurringTransaction, recurring_id)
    if not rule:
        return None
    rule.is_active = bool(active)
    session.commit()
    return rule


def update_recurring(
    session,
    recurring_id: int,
    category_id: int | None = None,
    amount: float | None = None,
    description: str | None = None,
    frequency: str | None = None,
    next_date: date | None = None,
    is_active: bool | None = None,
):
    rule = session.get(models.RecurringTransaction, recurring_id)
    if not rule:
        return None
    if frequency is not None:
        if frequency not in RECURRING_FREQUENCIES:
            raise ValueError(f"Unsupported frequency: {frequency}")
        rule.frequency = frequency
    if amount is not None:
        if float(amount) <= 0:
            raise ValueError("Amount must be positive")
        rule.amount = float(amount)
    if category_id is not None:
        if not session.get(models.Category, category_id):
            raise ValueError(f"Category {category_id} not found")
        rule.category_id = category_id
    if description is not None:
        rule.description = description.strip()
    if next_date is not None:
        rule.next_date = next_date
    if is_active is not None:
        rule.is_active = bool(is_active)
    session.commit()
    return rule


def delete_recurring(session, recurring_id: int) -> bool:
    rule = session.get(models.RecurringTransaction, recurring_id)
    if not rule:
        return False
    session.delete(rule)
    session.commit()
    logger.info("Deleted recurring %s", recurring_id)
    return True


def pending_recurring(session, today: date | None = None):
    today = today or date.today()
    return session.scalars(
        select(models.RecurringTransaction)
        .where(models.RecurringTransaction.is_active == True)  # noqa: E712
        .where(models.RecurringTransaction.next_date <= today)
        .order_by(models.RecurringTransaction.next_date)
    ).all()


def execute_recurring(session, recurring_id: int, today: date | None = None):
    """Book one occurrence of a recurring transaction and move its anchor forward.

    The booked transaction is dated ``today`` regardless of how overdue the
    rule is; ``next_date`` advances by exactly one period.
    """
    today = today or date.today()
    rule = session.get(models.RecurringTransaction, recurring_id)
    if not rule:
        raise ValueError(f"Recurring transaction {recurring_id} not found")
    if not rule.is_active:
        raise ValueError(f"Recurring transaction {recurring_id} is inactive")

    tx = models.Transaction(
        category_id=rule.category_id,
        amount=rule.amount,
        description=rule.description or "Recurring transaction",
        date=today,
        type=rule.category.type,
        payment_method="transfer",
    )
    session.add(tx)
    rule.next_date = advance_next_date(rule.next_date, rule.frequency)
    session.commit()
    session.refresh(tx)
    logger.info("Executed recurring %s; next due %s", rule.id, rule.next_date.isoformat())
    return tx, rule.next_date


def process_due_recurring(session, today: date | None = None) -> int:
    booked = 0
    for rule in pending_recurring(session, today):
        execute_recurring(session, rule.id, today)
        booked += 1
    return booked


def recurring_feed(session, active_only: bool = True) -> list[RecurringRule]:
    return [
        RecurringRule(
            id=r.id,
            amount=r.amount,
            category_type=r.category.type,
            frequency=r.frequency,
            next_date=r.next_date,
            is_active=r.is_active,
            description=r.description or "",
        )
        for r in list_recurring(session, active_only=active_only)
    ]
