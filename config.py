"""
Global configuration for CashCast.

Values here are plain module constants; only the database location can be
overridden from the environment (handy for tests and throwaway demos).
"""

import os

DATABASE_URL = os.getenv("CASHCAST_DATABASE_URL", "sqlite:///cashcast.db")

# Forecast horizon choices offered in the UI (days after today)
FORECAST_HORIZON_CHOICES = (7, 15, 30, 60, 90)
DEFAULT_FORECAST_DAYS = 30

# Trailing window of transaction history fed to the averager
HISTORY_LOOKBACK_MONTHS = 6

# Monthly averages are spread over a fixed 30-day month
DAILY_ESTIMATE_DIVISOR = 30

# Background processing of due recurring transactions
RECURRING_TICK_MINUTES = 60
