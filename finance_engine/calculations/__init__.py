"""
Deterministic calculation package.

Pure functions only: no I/O, no mutation of inputs, same output for
the same input.
"""

from finance_engine.calculations.dates import (
    days_in_month,
    get_effective_date,
    is_effective_date_within_current_month,
    is_in_month,
    month_bounds,
    month_key,
)
from finance_engine.calculations.forecast import compute_forecast, detect_balance_transition
from finance_engine.calculations.future_engine import (
    average_historical_variable,
    calculate_days_elapsed,
    calculate_days_remaining,
    compute_future_engine,
    month_progress,
)
from finance_engine.calculations.risk import compute_risk_assessment
from finance_engine.calculations.snapshot import compute_monthly_snapshot
from finance_engine.calculations.unified_metrics import (
    compute_unified_account_metrics,
    compute_unified_monthly_metrics,
)

__all__ = [
    "average_historical_variable",
    "calculate_days_elapsed",
    "calculate_days_remaining",
    "compute_forecast",
    "compute_future_engine",
    "compute_monthly_snapshot",
    "compute_risk_assessment",
    "compute_unified_account_metrics",
    "compute_unified_monthly_metrics",
    "days_in_month",
    "detect_balance_transition",
    "get_effective_date",
    "is_effective_date_within_current_month",
    "is_in_month",
    "month_bounds",
    "month_key",
    "month_progress",
]
