from __future__ import annotations

from datetime import date, timedelta

from sqlalchemy import select

from db import models
from services.ledger import ensure_default_categories

SAMPLE_RECURRING = [
    {"category": "Salary", "description": "Monthly salary", "amount": 4200.0, "frequency": "monthly", "day": 5},
    {"category": "Housing", "description": "Rent", "amount": 1500.0, "frequency": "monthly", "day": 10},
    {"category": "Leisure", "description": "Streaming bundle", "amount": 29.9, "frequency": "monthly", "day": 18},
    {"category": "Education", "description": "Annual course fee", "amount": 480.0, "frequency": "yearly", "day": 1},
]


def _category_ids(session) -> dict[str, int]:
    return {c.name: c.id for c in session.scalars(select(models.Category)).all()}


def _demo_transactions(start: date, ids: dict[str, int]):
    merchants = [("Food", "Grocer"), ("Transport", "Transit"), ("Food", "Coffee Spot"), ("Shopping", "Market")]
    for i in range(92):
        d = start + timedelta(days=i)
        if d.day == 5:
            yield {"category_id": ids["Salary"], "amount": 4200.0, "description": "Salary deposit", "date": d, "type": "income", "payment_method": "transfer"}
        elif d.day == 10:
            yield {"category_id": ids["Housing"], "amount": 1500.0, "description": "Rent payment", "date": d, "type": "expense", "payment_method": "transfer"}
        elif i % 9 == 0:
            yield {"category_id": ids["Freelance"], "amount": 350.0, "description": "Freelance invoice", "date": d, "type": "income", "payment_method": "pix"}
        else:
            category, merchant = merchants[i % len(merchants)]
            yield {
                "category_id": ids[category],
                "amount": round(12 + (i % 7) * 4.35, 2),
                "description": f"{merchant} purchase",
                "date": d,
                "type": "expense",
                "payment_method": "debit_card",
            }


def load_demo_data(session, today: date | None = None) -> dict:
    """Seed categories, ~3 months of history and a few recurring rules. Safe to call repeatedly."""
    today = today or date.today()
    ensure_default_categories(session)
    ids = _category_ids(session)

    tx_loaded = 0
    if not session.scalar(select(models.Transaction).limit(1)):
        for row in _demo_transactions(today - timedelta(days=92), ids):
            session.add(models.Transaction(**row))
            tx_loaded += 1

    for spec in SAMPLE_RECURRING:
        exists = session.scalar(
            select(models.RecurringTransaction).where(models.RecurringTransaction.description == spec["description"])
        )
        if exists:
            continue
        anchor = date(today.year, today.month, spec["day"])
        if anchor <= today:
            anchor = date(today.year + (today.month == 12), today.month % 12 + 1, spec["day"])
        session.add(
            models.RecurringTransaction(
                category_id=ids[spec["category"]],
                amount=spec["amount"],
                description=spec["description"],
                frequency=spec["frequency"],
                next_date=anchor,
                is_active=True,
            )
        )

    session.commit()
    return {
        "transactions_loaded": tx_loaded,
        "recurring_total": len(session.scalars(select(models.RecurringTransaction)).all()),
    }
