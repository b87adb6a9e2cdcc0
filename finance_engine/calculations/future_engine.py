"""
Future Projection Engine - end-of-month balance estimate

Formula:
    estimated_end_of_month = current_balance
                             - pending_fixed_expenses
                             - projected_variable_remaining

Variable spending is projected with a daily-rate model. The rate comes
from the recent historical average; when there is no history the
planned variable budget is used instead and the result says so.
"""

from datetime import date
from typing import Mapping, Optional

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.calculations.dates import (
    days_in_month,
    month_end,
    month_key,
    month_start,
    shift_month,
)
from finance_engine.config import EngineSettings, get_settings
from finance_engine.models.finance import (
    ConfidenceLevel,
    FutureEngineInput,
    FutureEngineResult,
    RiskLevel,
)


# =============================================================================
# TIME HELPERS
# =============================================================================

def calculate_days_remaining(month: date, reference_date: Optional[date] = None) -> int:
    """Days left in the month, today included. Between 0 and the month length."""
    today = reference_date or date.today()
    return max(0, min(days_in_month(month), (month_end(month) - today).days + 1))


def calculate_days_elapsed(month: date, reference_date: Optional[date] = None) -> int:
    """Days elapsed in the month, today included. Between 1 and the month length."""
    total = days_in_month(month)
    remaining = calculate_days_remaining(month, reference_date)
    return min(total, max(1, total - remaining + 1))


def month_progress(month: date, reference_date: Optional[date] = None) -> tuple[int, int]:
    """
    (days_elapsed, days_in_month) to feed the projection.

    Past and future months are projected as complete months.
    """
    today = reference_date or date.today()
    total = days_in_month(month)
    if month_start(month) != month_start(today):
        return total, total
    return calculate_days_elapsed(month, today), total


def average_historical_variable(
    monthly_totals: Mapping[str, float],
    month: date,
    settings: Optional[EngineSettings] = None,
) -> tuple[float, int]:
    """
    Average monthly variable spending over the months before `month`.

    Args:
        monthly_totals: Pre-aggregated variable expense totals keyed by YYYY-MM
        month: The month being projected (excluded from the window)

    Returns:
        (average, months_with_data). Months without spending do not
        dilute the average.
    """
    settings = settings or get_settings()
    window = [
        month_key(shift_month(month, -offset))
        for offset in range(1, settings.historical_months + 1)
    ]
    values = [float(monthly_totals[key]) for key in window if float(monthly_totals.get(key, 0) or 0) > 0]
    if not values:
        return 0.0, 0
    return sum(values) / len(values), len(values)


# =============================================================================
# CLASSIFICATION
# =============================================================================

def classify_risk_level(estimated_end_of_month: float, safety_buffer: float) -> RiskLevel:
    if estimated_end_of_month >= safety_buffer:
        return RiskLevel.SAFE
    if estimated_end_of_month >= 0:
        return RiskLevel.CAUTION
    return RiskLevel.DANGER


def calculate_risk_percentage(current_balance: float, estimated_end_of_month: float) -> float:
    """
    Position on a 0-100 progress bar (100 = fully safe).

    Piecewise linear: 50 when the estimate is exactly zero, 100 when
    nothing is spent, 0 when the balance would be lost twice over.
    """
    if current_balance <= 0:
        return 0.0
    if estimated_end_of_month >= current_balance:
        return 100.0
    if estimated_end_of_month <= 0:
        percentage = (current_balance + estimated_end_of_month) / current_balance * 50
    else:
        percentage = 50 + (estimated_end_of_month / current_balance) * 50
    return max(0.0, min(100.0, percentage))


def classify_confidence(
    has_history: bool,
    using_budget_fallback: bool,
    days_elapsed: int,
    settings: EngineSettings,
) -> ConfidenceLevel:
    if has_history and days_elapsed >= settings.high_confidence_min_days:
        return ConfidenceLevel.HIGH
    if has_history:
        return ConfidenceLevel.MEDIUM
    if using_budget_fallback and days_elapsed >= settings.medium_confidence_min_days:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


# =============================================================================
# MAIN FUNCTION
# =============================================================================

def compute_future_engine(
    engine_input: FutureEngineInput,
    settings: Optional[EngineSettings] = None,
    logger: Optional[DomainLogger] = None,
) -> FutureEngineResult:
    """
    Compute the end-of-month balance projection.

    Absent history and budget do not raise: they lower the confidence
    level and clear is_data_sufficient.
    """
    log = resolve_logger(logger)
    settings = settings or get_settings()

    buffer_percent = engine_input.safety_buffer_percent
    if buffer_percent is None:
        buffer_percent = settings.safety_buffer_percent

    has_history = engine_input.historical_variable_avg > 0
    using_budget_fallback = not has_history and engine_input.planned_budget_variable > 0
    effective_avg = (
        engine_input.historical_variable_avg if has_history
        else engine_input.planned_budget_variable
    )

    days_remaining = max(0, engine_input.days_in_month - engine_input.days_elapsed)
    daily_rate = effective_avg / engine_input.days_in_month if engine_input.days_in_month > 0 else 0.0
    projected_variable_remaining = daily_rate * days_remaining

    total_projected_expenses = engine_input.pending_fixed_expenses + projected_variable_remaining
    estimated_end_of_month = engine_input.current_balance - total_projected_expenses

    safety_buffer = abs(engine_input.current_balance) * (buffer_percent / 100)
    safe_spending_zone = max(
        0.0,
        engine_input.current_balance - engine_input.pending_fixed_expenses - safety_buffer,
    )

    result = FutureEngineResult(
        estimated_end_of_month=estimated_end_of_month,
        safe_spending_zone=safe_spending_zone,
        safety_buffer=safety_buffer,
        risk_level=classify_risk_level(estimated_end_of_month, safety_buffer),
        risk_percentage=calculate_risk_percentage(engine_input.current_balance, estimated_end_of_month),
        effective_variable_avg=effective_avg,
        daily_variable_rate=daily_rate,
        projected_variable_remaining=projected_variable_remaining,
        total_projected_expenses=total_projected_expenses,
        days_remaining=days_remaining,
        using_budget_fallback=using_budget_fallback,
        is_data_sufficient=has_history or engine_input.planned_budget_variable > 0,
        confidence_level=classify_confidence(
            has_history, using_budget_fallback, engine_input.days_elapsed, settings,
        ),
    )

    log.forecast(
        "Future engine computed",
        estimated_end_of_month=round(estimated_end_of_month, 2),
        risk_level=result.risk_level.value,
        using_budget_fallback=using_budget_fallback,
        confidence_level=result.confidence_level.value,
    )
    return result
