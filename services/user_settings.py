from __future__ import annotations

from sqlalchemy import select

from db import models

EXTRA_BALANCE_TYPES = ("bonus", "investment", "sales", "other")


def get_or_create_user_settings(session):
    settings = session.scalar(select(models.UserSettings).order_by(models.UserSettings.id))
    if settings:
        return settings

    settings = models.UserSettings(user_name="Personal User")
    session.add(settings)
    session.commit()
    session.refresh(settings)
    return settings


def save_user_settings(session, user_name: str):
    settings = get_or_create_user_settings(session)
    settings.user_name = (user_name or "Personal User").strip() or "Personal User"
    session.commit()
    session.refresh(settings)
    return settings


def _balance_attr(kind: str) -> str:
    if kind not in EXTRA_BALANCE_TYPES:
        raise ValueError(f"Unknown extra balance: {kind}")
    return f"{kind}_balance"


def set_extra_balance(session, kind: str, value: float):
    attr = _balance_attr(kind)
    settings = get_or_create_user_settings(session)
    setattr(settings, attr, float(value))
    session.commit()
    session.refresh(settings)
    return settings


def adjust_extra_balance(session, kind: str, delta: float):
    attr = _balance_attr(kind)
    settings = get_or_create_user_settings(session)
    current = float(getattr(settings, attr) or 0.0)
    return set_extra_balance(session, kind, max(0.0, current + float(delta)))


def extra_balances(session) -> dict[str, float]:
    settings = get_or_create_user_settings(session)
    return {kind: float(getattr(settings, f"{kind}_balance") or 0.0) for kind in EXTRA_BALANCE_TYPES}
