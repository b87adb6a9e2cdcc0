"""
Finance Evaluation Pipeline

Ties the calculation and rule components into one call that a caller
re-runs on every data refresh:

    snapshot → forecast → transition → account metrics → risk → rules

DESIGN DECISION: The pipeline is a plain function, not a stateful
service. The previous balance state comes in as an argument and the
new one goes out in the result; persisting it is the caller's job.

CRITICAL: Risk balances come from the available (non-reserve) account
totals, never from the snapshot. Reserve money is not liquidity.
"""

import datetime as dt
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.calculations import (
    compute_forecast,
    compute_monthly_snapshot,
    compute_risk_assessment,
    compute_unified_account_metrics,
    compute_unified_monthly_metrics,
    detect_balance_transition,
)
from finance_engine.config import EngineSettings, get_settings
from finance_engine.models import (
    Account,
    AccountMetricsResult,
    BalanceState,
    BalanceTransition,
    ForecastState,
    MonthlySnapshot,
    NotificationRulesOutput,
    RiskAssessment,
    Transaction,
    UnifiedMonthlyMetrics,
)
from finance_engine.rules import evaluate_notification_rules


class FinanceEvaluation(BaseModel):
    """Everything one pipeline run produces."""
    model_config = ConfigDict(frozen=True)

    snapshot: MonthlySnapshot
    monthly_metrics: UnifiedMonthlyMetrics
    forecast: ForecastState
    balance_transition: Optional[BalanceTransition] = None
    account_metrics: AccountMetricsResult
    risk_assessment: RiskAssessment
    rules: NotificationRulesOutput

    @property
    def balance_state(self) -> BalanceState:
        """State to persist for the next run."""
        return self.forecast.balance_state


def evaluate_finance_state(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    month: dt.date,
    previous_balance_state: Optional[BalanceState] = None,
    reference_date: Optional[dt.date] = None,
    settings: Optional[EngineSettings] = None,
    logger: Optional[DomainLogger] = None,
) -> FinanceEvaluation:
    """
    Run the full evaluation for one month.

    Args:
        transactions: All household transactions (any month, any status)
        accounts: Household accounts
        month: Any date in the month being evaluated
        previous_balance_state: State persisted by the previous run, if any
        reference_date: "Today". Defaults to date.today().
        settings: Engine settings. Defaults to get_settings().
        logger: Domain logger. Defaults to a no-op logger.
    """
    log = resolve_logger(logger)
    settings = settings or get_settings()
    reference_date = reference_date or dt.date.today()
    transactions = list(transactions)
    accounts = list(accounts)

    snapshot = compute_monthly_snapshot(transactions, month, logger)
    monthly_metrics = compute_unified_monthly_metrics(transactions, month, logger)
    forecast = compute_forecast(snapshot, reference_date, settings, logger)
    transition = detect_balance_transition(previous_balance_state, forecast.balance_state, logger)

    account_metrics = compute_unified_account_metrics(
        transactions, accounts, month, reference_date, logger
    )
    risk_assessment = compute_risk_assessment(
        transactions,
        realized_balance=account_metrics.totals.available_realized_balance,
        projected_balance=account_metrics.totals.available_projected_balance,
        reference_date=reference_date,
        settings=settings,
        logger=logger,
    )

    rules = evaluate_notification_rules(
        snapshot,
        forecast,
        risk_assessment,
        previous_balance_state,
        transition,
        settings,
        logger,
    )

    log.rules(
        "Finance evaluation complete",
        month_key=snapshot.month_key,
        balance_state=forecast.balance_state.value,
        actions=len(rules.actions),
        toasts=len(rules.toasts),
    )
    return FinanceEvaluation(
        snapshot=snapshot,
        monthly_metrics=monthly_metrics,
        forecast=forecast,
        balance_transition=transition,
        account_metrics=account_metrics,
        risk_assessment=risk_assessment,
        rules=rules,
    )
