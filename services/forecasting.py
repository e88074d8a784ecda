from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

import pandas as pd
from pydantic import ValidationError

from config import DEFAULT_FORECAST_DAYS, HISTORY_LOOKBACK_MONTHS
from schemas.domain import (
    ForecastAnalysis,
    ForecastPoint,
    ForecastResponse,
    ForecastSummary,
    RecurringRule,
    TransactionRecord,
    coerce_records,
)
from services.history import daily_estimate, estimate_monthly_averages
from services.ledger import current_balance as ledger_balance
from services.ledger import transaction_feed
from services.recurrence import rule_fires
from services.recurring import recurring_feed

logger = logging.getLogger(__name__)


class ForecastInputError(ValueError):
    pass


def round_money(value: float) -> float:
    return float(Decimal(repr(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def generate_forecast(
    transactions: Iterable[TransactionRecord | dict],
    recurring_rules: Iterable[RecurringRule | dict],
    current_balance: float,
    horizon_days: int = DEFAULT_FORECAST_DAYS,
    start: date | None = None,
) -> list[ForecastPoint]:
    """Project the daily balance from ``start`` (today) through ``start + horizon_days``.

    Each day's change is the signed total of the active recurring rules due
    that day plus the smoothed historical daily net. The running balance is
    kept at full precision; emitted balances and changes are rounded to cents.
    """
    if horizon_days < 0:
        raise ForecastInputError(f"horizon_days must be >= 0, got {horizon_days}")

    history = coerce_records(TransactionRecord, transactions)
    rules = [r for r in coerce_records(RecurringRule, recurring_rules) if r.is_active]
    baseline_daily = daily_estimate(estimate_monthly_averages(history))

    start = start or date.today()
    running = float(current_balance)
    points: list[ForecastPoint] = []

    for offset in range(horizon_days + 1):
        day = start + timedelta(days=offset)
        change = 0.0
        for rule in rules:
            if rule_fires(rule, day):
                change += rule.amount if rule.category_type == "income" else -rule.amount
        change += baseline_daily
        running += change
        points.append(
            ForecastPoint(
                date=day,
                balance=round_money(running),
                change=round_money(change),
                kind="current" if offset == 0 else "projected",
            )
        )

    return points


def summarize_forecast(series: Sequence[ForecastPoint | dict], current_balance: float, horizon_days: int) -> ForecastSummary:
    series = coerce_records(ForecastPoint, series)
    if not series:
        return ForecastSummary(
            current_balance=current_balance,
            projected_balance=current_balance,
            highest_balance=current_balance,
            lowest_balance=current_balance,
            days_until_negative=None,
            average_daily_change=0.0,
        )

    balances = [p.balance for p in series]
    projected = balances[-1]
    days_until_negative = next((idx for idx, bal in enumerate(balances) if bal < 0), None)
    average_daily_change = (projected - current_balance) / horizon_days if horizon_days else 0.0

    return ForecastSummary(
        current_balance=current_balance,
        projected_balance=projected,
        highest_balance=max(balances),
        lowest_balance=min(balances),
        days_until_negative=days_until_negative,
        average_daily_change=average_daily_change,
    )


def forecast_to_frame(series: Sequence[ForecastPoint]) -> pd.DataFrame:
    if not series:
        return pd.DataFrame(columns=["date", "balance", "change", "kind"])
    return pd.DataFrame([p.model_dump() for p in series])


def build_cash_flow_forecast(
    session,
    horizon_days: int = DEFAULT_FORECAST_DAYS,
    include_recurring: bool = True,
    lookback_months: int = HISTORY_LOOKBACK_MONTHS,
    start: date | None = None,
) -> ForecastResponse:
    start = start or date.today()
    since = (pd.Timestamp(start) - pd.DateOffset(months=lookback_months)).date()

    balance = ledger_balance(session)
    analysis = ForecastAnalysis(forecast_days=horizon_days)
    try:
        history = transaction_feed(session, since=since)
        rules = recurring_feed(session, active_only=True) if include_recurring else []
        analysis = ForecastAnalysis(total_transactions=len(history), recurring_count=len(rules), forecast_days=horizon_days)
        forecast = generate_forecast(history, rules, balance, horizon_days, start=start)
    except ValidationError:
        logger.exception("Stored transactions or recurring rules failed validation; returning empty forecast")
        forecast = []

    logger.info(
        "Built %d-day forecast from %d transactions and %d recurring rules",
        horizon_days,
        analysis.total_transactions,
        analysis.recurring_count,
    )
    return ForecastResponse(current_balance=balance, forecast=forecast, analysis=analysis)
