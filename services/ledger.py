from __future__ import annotations

import calendar
import logging
from datetime import date

import pandas as pd
from sqlalchemy import func, select

from db import models
from schemas.domain import PAYMENT_METHODS, TransactionRecord
from services.user_settings import get_or_create_user_settings

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Food", "color": "#ef4444", "icon": "UtensilsCrossed", "type": "expense"},
    {"name": "Transport", "color": "#3b82f6", "icon": "Car", "type": "expense"},
    {"name": "Housing", "color": "#10b981", "icon": "Home", "type": "expense"},
    {"name": "Health", "color": "#f59e0b", "icon": "Heart", "type": "expense"},
    {"name": "Education", "color": "#8b5cf6", "icon": "GraduationCap", "type": "expense"},
    {"name": "Leisure", "color": "#06b6d4", "icon": "Gamepad2", "type": "expense"},
    {"name": "Shopping", "color": "#ec4899", "icon": "ShoppingBag", "type": "expense"},
    {"name": "Salary", "color": "#10b981", "icon": "DollarSign", "type": "income"},
    {"name": "Freelance", "color": "#3b82f6", "icon": "Briefcase", "type": "income"},
    {"name": "Investments", "color": "#f59e0b", "icon": "TrendingUp", "type": "income"},
]


def add_category(session, name: str, type: str, color: str = "#6b7280", icon: str = "Tag"):  # noqa: A002
    if type not in ("income", "expense"):
        raise ValueError(f"Unknown category type: {type}")
    name = (name or "").strip()
    if not name:
        raise ValueError("Category name is required")

    existing = session.scalar(select(models.Category).where(models.Category.name == name))
    if existing:
        existing.type = type
        existing.color = color
        existing.icon = icon
        session.commit()
        return existing

    category = models.Category(name=name, type=type, color=color, icon=icon)
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


def update_category(
    session,
    category_id: int,
    name: str | None = None,
    type: str | None = None,  # noqa: A002
    color: str | None = None,
    icon: str | None = None,
):
    category = session.get(models.Category, category_id)
    if not category:
        return None
    if type is not None:
        if type not in ("income", "expense"):
            raise ValueError(f"Unknown category type: {type}")
        category.type = type
    if name is not None:
        name = name.strip()
        if not name:
            raise ValueError("Category name is required")
        category.name = name
    if color is not None:
        category.color = color
    if icon is not None:
        category.icon = icon
    session.commit()
    return category


def delete_category(session, category_id: int) -> bool:
    category = session.get(models.Category, category_id)
    if not category:
        return False
    in_use = session.scalar(
        select(func.count()).select_from(models.Transaction).where(models.Transaction.category_id == category_id)
    ) or session.scalar(
        select(func.count())
        .select_from(models.RecurringTransaction)
        .where(models.RecurringTransaction.category_id == category_id)
    )
    if in_use:
        raise ValueError(f"Category {category.name} is still used by transactions or recurring rules")
    session.delete(category)
    session.commit()
    return True


def ensure_default_categories(session) -> int:
    created = 0
    for spec in DEFAULT_CATEGORIES:
        if session.scalar(select(models.Category).where(models.Category.name == spec["name"])):
            continue
        session.add(models.Category(**spec))
        created += 1
    session.commit()
    return created


def list_categories(session, type: str | None = None):  # noqa: A002
    stmt = select(models.Category).order_by(models.Category.type, models.Category.name)
    if type:
        stmt = stmt.where(models.Category.type == type)
    return session.scalars(stmt).all()


def add_transaction(
    session,
    category_id: int,
    amount: float,
    description: str,
    on: date,
    payment_method: str = "cash",
):
    if amount is None or float(amount) <= 0:
        raise ValueError("Amount must be positive")
    if payment_method not in PAYMENT_METHODS:
        raise ValueError(f"Unknown payment method: {payment_method}")
    category = session.get(models.Category, category_id)
    if not category:
        raise ValueError(f"Category {category_id} not found")

    tx = models.Transaction(
        category_id=category.id,
        amount=float(amount),
        description=(description or "").strip(),
        date=on,
        type=category.type,
        payment_method=payment_method,
    )
    session.add(tx)
    session.commit()
    session.refresh(tx)
    logger.info("Recorded %s of %.2f in %s", tx.type, tx.amount, category.name)
    return tx


def update_transaction(
    session,
    transaction_id: int,
    category_id: int | None = None,
    amount: float | None = None,
    description: str | None = None,
    on: date | None = None,
    payment_method: str | None = None,
):
    tx = session.get(models.Transaction, transaction_id)
    if not tx:
        return None
    if amount is not None:
        if float(amount) <= 0:
            raise ValueError("Amount must be positive")
        tx.amount = float(amount)
    if payment_method is not None:
        if payment_method not in PAYMENT_METHODS:
            raise ValueError(f"Unknown payment method: {payment_method}")
        tx.payment_method = payment_method
    if category_id is not None:
        category = session.get(models.Category, category_id)
        if not category:
            raise ValueError(f"Category {category_id} not found")
        tx.category_id = category.id
        tx.type = category.type
    if description is not None:
        tx.description = description.strip()
    if on is not None:
        tx.date = on
    session.commit()
    return tx


def delete_transaction(session, transaction_id: int) -> bool:
    tx = session.get(models.Transaction, transaction_id)
    if not tx:
        return False
    session.delete(tx)
    session.commit()
    return True


def _month_bounds(month: int, year: int) -> tuple[date, date]:
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def list_transactions(
    session,
    since: date | None = None,
    month: int | None = None,
    year: int | None = None,
    category_id: int | None = None,
):
    """Transactions newest first. ``month`` only filters when ``year`` is given too."""
    stmt = select(models.Transaction).order_by(models.Transaction.date.desc(), models.Transaction.id.desc())
    if since:
        stmt = stmt.where(models.Transaction.date >= since)
    if month and year:
        first, last = _month_bounds(month, year)
        stmt = stmt.where(models.Transaction.date >= first, models.Transaction.date <= last)
    if category_id:
        stmt = stmt.where(models.Transaction.category_id == category_id)
    return session.scalars(stmt).all()


def dashboard_summary(session, month: int | None = None, year: int | None = None, top_n: int = 5) -> dict:
    txs = list_transactions(session, month=month, year=year)
    if not txs:
        return {"total_income": 0.0, "total_expenses": 0.0, "balance": 0.0, "transaction_count": 0, "top_categories": []}

    df = pd.DataFrame(
        [{"category": t.category.name if t.category else "Uncategorized", "type": t.type, "amount": t.amount} for t in txs]
    )
    total_income = float(df.loc[df["type"] == "income", "amount"].sum())
    total_expenses = float(df.loc[df["type"] == "expense", "amount"].sum())
    by_category = (
        df.groupby("category", as_index=False)
        .agg(amount=("amount", "sum"), entries=("amount", "size"))
        .sort_values(["amount", "category"], ascending=[False, True])
        .head(top_n)
    )

    return {
        "total_income": round(total_income, 2),
        "total_expenses": round(total_expenses, 2),
        "balance": round(total_income - total_expenses, 2),
        "transaction_count": len(df),
        "top_categories": [
            {"category": row.category, "amount": round(float(row.amount), 2), "count": int(row.entries)}
            for row in by_category.itertuples(index=False)
        ],
    }


def current_balance(session) -> float:
    totals = dict(
        session.execute(
            select(models.Transaction.type, func.coalesce(func.sum(models.Transaction.amount), 0.0)).group_by(
                models.Transaction.type
            )
        ).all()
    )
    settings = get_or_create_user_settings(session)
    return float(totals.get("income", 0.0)) - float(totals.get("expense", 0.0)) + settings.total_extra_balance


def transaction_feed(session, since: date | None = None) -> list[TransactionRecord]:
    return [
        TransactionRecord(id=t.id, amount=t.amount, type=t.type, date=t.date, category_id=t.category_id)
        for t in list_transactions(session, since=since)
    ]
