from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import pandas as pd

from config import DAILY_ESTIMATE_DIVISOR
from schemas.domain import TransactionRecord, coerce_records


@dataclass(frozen=True)
class MonthlyAverages:
    total_income: float = 0.0
    total_expenses: float = 0.0

    @property
    def net(self) -> float:
        return self.total_income - self.total_expenses


def estimate_monthly_averages(transactions: Iterable[TransactionRecord | dict]) -> MonthlyAverages:
    """Average income and expense totals per calendar month present in the history.

    Months are only counted when at least one transaction falls in them; a
    month with income but no expenses contributes 0 to the expense average.
    """
    records = coerce_records(TransactionRecord, transactions)
    if not records:
        return MonthlyAverages()

    df = pd.DataFrame(
        [{"month": t.date.strftime("%Y-%m"), "type": t.type, "amount": t.amount} for t in records]
    )
    monthly = df.pivot_table(index="month", columns="type", values="amount", aggfunc="sum", fill_value=0.0)
    if monthly.empty:
        return MonthlyAverages()

    income = float(monthly["income"].mean()) if "income" in monthly.columns else 0.0
    expenses = float(monthly["expense"].mean()) if "expense" in monthly.columns else 0.0
    return MonthlyAverages(total_income=income, total_expenses=expenses)


def daily_estimate(averages: MonthlyAverages) -> float:
    return averages.net / DAILY_ESTIMATE_DIVISOR
