"""Recurring-rule date logic: which days a rule falls due, and how its anchor moves on."""

from __future__ import annotations

from datetime import date, timedelta

from schemas.domain import RecurringRule


def rule_fires(rule: RecurringRule, target: date) -> bool:
    """Return True when ``rule`` is due on ``target``.

    Monthly rules repeat on the anchor's day-of-month from the anchor onwards;
    a month without that day (e.g. the 31st in April) gets no occurrence.
    Weekly and yearly rules only fire on their recorded ``next_date``.
    """
    if target == rule.next_date:
        return True
    if rule.frequency == "monthly":
        return target.day == rule.next_date.day and target >= rule.next_date
    return False


def _shift_months(d: date, months: int) -> date:
    # Days past the end of the target month carry into the next month (Jan 31 -> Mar 3).
    month_index = d.month - 1 + months
    first = date(d.year + month_index // 12, month_index % 12 + 1, 1)
    return first + timedelta(days=d.day - 1)


def advance_next_date(current: date, frequency: str) -> date:
    if frequency == "weekly":
        return current + timedelta(days=7)
    if frequency == "monthly":
        return _shift_months(current, 1)
    if frequency == "yearly":
        return _shift_months(current, 12)
    raise ValueError(f"Unsupported frequency: {frequency}")
