from __future__ import annotations

import uuid
from datetime import date
from itertools import accumulate
from typing import Iterable, Sequence

from schemas.domain import ForecastPoint, ScenarioEvent, coerce_records

# Rough occurrences per 30-day window, used for the headline impact estimate only.
_IMPACT_MULTIPLIERS = {"once": 1, "weekly": 4, "monthly": 30}


def scenario_applies(scenario: ScenarioEvent, point_date: date) -> bool:
    if scenario.frequency == "once":
        return point_date == scenario.date
    if scenario.frequency == "weekly":
        days_diff = (point_date - scenario.date).days
        return days_diff >= 0 and days_diff % 7 == 0
    if scenario.frequency == "monthly":
        return point_date.day == scenario.date.day and point_date >= scenario.date
    return False


def apply_scenarios(baseline: Sequence[ForecastPoint | dict], scenarios: Iterable[ScenarioEvent | dict]) -> list[ForecastPoint]:
    """Overlay hypothetical events on a baseline series and return a new series.

    An event changes ``change`` only on the day it occurs, and shifts
    ``balance`` on that day and every day after it. Overlapping events add up.
    """
    baseline = coerce_records(ForecastPoint, baseline)
    events = coerce_records(ScenarioEvent, scenarios)
    day_impacts = [0.0] * len(baseline)

    for event in events:
        for idx, point in enumerate(baseline):
            if scenario_applies(event, point.date):
                day_impacts[idx] += event.impact

    carried = list(accumulate(day_impacts))
    return [
        point.model_copy(update={"balance": point.balance + carried[idx], "change": point.change + day_impacts[idx]})
        for idx, point in enumerate(baseline)
    ]


def estimate_total_impact(scenarios: Iterable[ScenarioEvent | dict]) -> float:
    return sum(s.impact * _IMPACT_MULTIPLIERS[s.frequency] for s in coerce_records(ScenarioEvent, scenarios))


def new_scenario(description: str, amount: float, type: str, on: date, frequency: str = "once") -> ScenarioEvent:  # noqa: A002
    return ScenarioEvent(
        id=uuid.uuid4().hex[:12],
        description=(description or "").strip(),
        amount=amount,
        type=type,
        date=on,
        frequency=frequency,
    )
