"""Pydantic models for the data the forecast engine consumes and produces.

Every model accepts either snake_case or the camelCase keys used by the
transaction/recurring feeds, and dumps camelCase with ``by_alias=True``.
"""

from __future__ import annotations

import datetime as dt
from typing import Iterable, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

EntryType = Literal["income", "expense"]
RecurringFrequency = Literal["weekly", "monthly", "yearly"]
ScenarioFrequency = Literal["once", "weekly", "monthly"]
PointKind = Literal["current", "projected"]
PaymentMethod = Literal["cash", "credit_card", "debit_card", "pix", "transfer"]

PAYMENT_METHODS: tuple[str, ...] = ("cash", "credit_card", "debit_card", "pix", "transfer")
RECURRING_FREQUENCIES: tuple[str, ...] = ("weekly", "monthly", "yearly")
SCENARIO_FREQUENCIES: tuple[str, ...] = ("once", "weekly", "monthly")


class _FeedModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")


class TransactionRecord(_FeedModel):
    id: int | str | None = None
    amount: float = Field(gt=0)
    type: EntryType
    date: dt.date
    category_id: int | str | None = None


class RecurringRule(_FeedModel):
    id: int | str | None = None
    amount: float = Field(gt=0)
    category_type: EntryType
    frequency: RecurringFrequency
    next_date: dt.date
    is_active: bool = True
    description: str = ""


class ForecastPoint(_FeedModel):
    date: dt.date
    balance: float
    change: float
    kind: PointKind = "projected"


class ScenarioEvent(_FeedModel):
    id: int | str
    description: str = Field(min_length=1)
    amount: float = Field(gt=0)
    type: EntryType
    date: dt.date
    frequency: ScenarioFrequency = "once"

    @property
    def impact(self) -> float:
        return self.amount if self.type == "income" else -self.amount


class ForecastSummary(_FeedModel):
    current_balance: float
    projected_balance: float
    highest_balance: float
    lowest_balance: float
    days_until_negative: int | None = None
    average_daily_change: float


class ForecastAnalysis(_FeedModel):
    total_transactions: int = 0
    recurring_count: int = 0
    forecast_days: int = 0


class ForecastResponse(_FeedModel):
    current_balance: float
    forecast: list[ForecastPoint] = Field(default_factory=list)
    analysis: ForecastAnalysis = Field(default_factory=ForecastAnalysis)


ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_records(model: type[ModelT], items: Iterable[ModelT | dict]) -> list[ModelT]:
    """Validate raw feed entries into ``model`` instances.

    Raises pydantic.ValidationError on the first malformed entry.
    """
    return [item if isinstance(item, model) else model.model_validate(item) for item in items]
