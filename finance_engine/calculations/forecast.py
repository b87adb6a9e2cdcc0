"""
Forecast Deriver

Turns a snapshot into a signed risk amount, a two-state balance
classification and the risk-preview flag.

The preview is only offered while there are at least
`risk_preview_min_days` left in the month: a risk that is already too
late to act on is not worth an early warning.
"""

from datetime import date
from typing import Optional

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.calculations.dates import month_end
from finance_engine.calculations.snapshot import ZERO
from finance_engine.config import EngineSettings, get_settings
from finance_engine.models.finance import (
    BalanceState,
    BalanceTransition,
    ForecastState,
    MonthlySnapshot,
)


def compute_forecast(
    snapshot: MonthlySnapshot,
    reference_date: Optional[date] = None,
    settings: Optional[EngineSettings] = None,
    logger: Optional[DomainLogger] = None,
) -> ForecastState:
    """
    Compute forecast state from a monthly snapshot.

    Args:
        snapshot: The monthly snapshot
        reference_date: The date to calculate from (defaults to today)
    """
    log = resolve_logger(logger)
    settings = settings or get_settings()
    today = reference_date or date.today()

    is_negative = snapshot.saldo_previsto_mes < 0
    risk_amount = abs(snapshot.saldo_previsto_mes) if is_negative else ZERO
    balance_state = BalanceState.NEGATIVE if is_negative else BalanceState.NON_NEGATIVE

    end = month_end(snapshot.month)
    days_until_month_end = (end - today).days

    # Today inside the month, or the month has not started yet
    is_current_or_future_month = today <= end

    show_risk_preview = (
        is_negative
        and snapshot.expense_planned > 0
        and is_current_or_future_month
        and days_until_month_end >= settings.risk_preview_min_days
    )

    forecast = ForecastState(
        is_negative=is_negative,
        risk_amount=risk_amount,
        balance_state=balance_state,
        days_until_month_end=days_until_month_end,
        is_current_or_future_month=is_current_or_future_month,
        show_risk_preview=show_risk_preview,
    )

    log.forecast(
        "Forecast computed",
        month_key=snapshot.month_key,
        balance_state=balance_state.value,
        risk_amount=str(forecast.risk_amount),
        show_risk_preview=show_risk_preview,
        days_until_month_end=days_until_month_end,
    )
    return forecast


def detect_balance_transition(
    previous_state: Optional[BalanceState],
    current_state: BalanceState,
    logger: Optional[DomainLogger] = None,
) -> Optional[BalanceTransition]:
    """
    Compare two balance states.

    Returns None when there is no previous state or nothing changed.
    """
    log = resolve_logger(logger)
    if previous_state is None:
        return None

    if previous_state == BalanceState.NEGATIVE and current_state == BalanceState.NON_NEGATIVE:
        log.transition("Balance transition", previous=previous_state.value, current=current_state.value)
        return BalanceTransition.NEGATIVE_TO_POSITIVE

    if previous_state == BalanceState.NON_NEGATIVE and current_state == BalanceState.NEGATIVE:
        log.transition("Balance transition", previous=previous_state.value, current=current_state.value)
        return BalanceTransition.POSITIVE_TO_NEGATIVE

    return None
