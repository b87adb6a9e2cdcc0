"""
Notification Rule Evaluator

MESSAGE CONTRACT: returns message keys + params, never final text.
The evaluator only DECIDES; the persistence collaborator applies the
actions, matching stored notifications by (event_type, reference_id).

Rule order (fixed relative priority):
1. Balance transition toasts
2. Overdue payments (one grouped notification)
3. Month at risk (only when nothing is overdue)
4. Coverage risk (only when nothing is overdue and the month is not negative)
5. Recovery archival
"""

from typing import Optional

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.config import EngineSettings, get_settings
from finance_engine.models.finance import (
    BalanceState,
    BalanceTransition,
    ForecastState,
    MonthlySnapshot,
    RiskAssessment,
)
from finance_engine.models.notification import (
    ArchiveAction,
    CreateAction,
    EventType,
    NotificationPayload,
    NotificationRulesOutput,
    NotificationSeverity,
    ToastPayload,
    ToastVariant,
)


OVERDUE_REFERENCE_ID = "overdue_payments"

CTA_VIEW_TRANSACTIONS = "common.viewTransactions"
CTA_VIEW_TRANSACTION = "common.viewTransaction"


# =============================================================================
# INDIVIDUAL RULES
# =============================================================================

def transition_toasts(
    transition: Optional[BalanceTransition],
    forecast: ForecastState,
) -> list[ToastPayload]:
    """Toasts for a balance state change, independent of every other rule."""
    if transition == BalanceTransition.POSITIVE_TO_NEGATIVE:
        return [ToastPayload(
            variant=ToastVariant.DESTRUCTIVE,
            title_key="toasts.risk_month_negative.title",
            description_key="toasts.risk_month_negative.description",
            params={"amount": float(abs(forecast.risk_amount))},
        )]
    if transition == BalanceTransition.NEGATIVE_TO_POSITIVE:
        return [ToastPayload(
            title_key="toasts.month_recovered.title",
            description_key="toasts.month_recovered.description",
        )]
    return []


def overdue_payments_action(
    risk: RiskAssessment,
    settings: EngineSettings,
) -> Optional[CreateAction]:
    """One CREATE grouping every overdue expense under a fixed reference id."""
    if not risk.has_overdue_expenses:
        return None

    overdue = risk.overdue_expenses
    count = len(overdue)
    max_days_overdue = max(e.days_overdue for e in overdue)
    single = overdue[0] if count == 1 else None

    message_key = (
        "notifications.messages.payment_delayed_single" if single is not None
        else "notifications.messages.payment_delayed_multiple"
    )
    severity = (
        NotificationSeverity.ACTION
        if max_days_overdue > settings.overdue_action_threshold_days
        else NotificationSeverity.WARNING
    )

    return CreateAction(payload=NotificationPayload(
        event_type=EventType.PAYMENT_DELAYED.value,
        reference_id=OVERDUE_REFERENCE_ID,
        message_key=message_key,
        params={
            "count": count,
            "maxDaysOverdue": max_days_overdue,
            "daysOverdue": single.days_overdue if single is not None else max_days_overdue,
            "description": single.description if single is not None else "",
            "categoryName": (single.category_name or "") if single is not None else "",
            "subcategoryName": (single.subcategory_name or "") if single is not None else "",
            "transactionIds": tuple(e.id for e in overdue),
        },
        severity=severity,
        entity_type="transaction",
        entity_id=single.id if single is not None else None,
        cta_label_key=CTA_VIEW_TRANSACTIONS,
        cta_target="/transactions?view=overdue",
    ))


def month_at_risk_action(
    snapshot: MonthlySnapshot,
    forecast: ForecastState,
    risk: RiskAssessment,
) -> Optional[CreateAction]:
    """Preview (warning) while there is time to react, full risk (action) otherwise."""
    if not forecast.is_negative or risk.has_overdue_expenses:
        return None

    month = snapshot.month_key
    if forecast.show_risk_preview:
        return CreateAction(payload=NotificationPayload(
            event_type=EventType.MONTH_AT_RISK_PREVIEW.value,
            reference_id=month,
            message_key="notifications.messages.month_at_risk_preview",
            params={"monthKey": month},
            severity=NotificationSeverity.WARNING,
            entity_type="month",
            entity_id=month,
            cta_label_key=CTA_VIEW_TRANSACTIONS,
            cta_target=f"/transactions?view=month_pending&month={month}",
        ))

    return CreateAction(payload=NotificationPayload(
        event_type=EventType.MONTH_AT_RISK.value,
        reference_id=month,
        message_key="notifications.messages.month_at_risk",
        params={"amount": float(abs(forecast.risk_amount)), "monthKey": month},
        severity=NotificationSeverity.ACTION,
        entity_type="month",
        entity_id=month,
        cta_label_key=CTA_VIEW_TRANSACTIONS,
        cta_target="/transactions?view=overdue",
    ))


def coverage_risk_actions(
    forecast: ForecastState,
    risk: RiskAssessment,
) -> list[CreateAction]:
    """One CREATE per at-risk expense (not grouped)."""
    if not risk.has_coverage_risk or risk.has_overdue_expenses or forecast.is_negative:
        return []

    return [
        CreateAction(payload=NotificationPayload(
            event_type=EventType.UPCOMING_EXPENSE_COVERAGE_RISK.value,
            reference_id=expense.id,
            message_key="notifications.messages.coverage_risk",
            params={
                "description": expense.description,
                "daysUntilDue": expense.days_until_due,
                "amount": float(expense.amount),
            },
            severity=NotificationSeverity.WARNING,
            entity_type="transaction",
            entity_id=expense.id,
            cta_label_key=CTA_VIEW_TRANSACTION,
            cta_target=f"/transactions?highlight={expense.id}",
        ))
        for expense in risk.coverage_risk_expenses
    ]


def recovery_archive_actions(
    snapshot: MonthlySnapshot,
    transition: Optional[BalanceTransition],
) -> list[ArchiveAction]:
    """Retire both month-at-risk families once the month recovers."""
    if transition != BalanceTransition.NEGATIVE_TO_POSITIVE:
        return []
    return [
        ArchiveAction(event_type=EventType.MONTH_AT_RISK.value, reference_id=snapshot.month_key),
        ArchiveAction(event_type=EventType.MONTH_AT_RISK_PREVIEW.value, reference_id=snapshot.month_key),
    ]


# =============================================================================
# EVALUATION
# =============================================================================

def evaluate_notification_rules(
    snapshot: MonthlySnapshot,
    forecast: ForecastState,
    risk_assessment: RiskAssessment,
    previous_balance_state: Optional[BalanceState],
    balance_transition: Optional[BalanceTransition],
    settings: Optional[EngineSettings] = None,
    logger: Optional[DomainLogger] = None,
) -> NotificationRulesOutput:
    """
    Evaluate notification rules and return the actions to take.

    No deduplication against stored notifications happens here; see
    finance_engine.rules.reconciliation for that decision.
    """
    log = resolve_logger(logger)
    settings = settings or get_settings()

    log.rules(
        "Evaluating notification rules",
        month_key=snapshot.month_key,
        balance_state=forecast.balance_state.value,
        previous_state=previous_balance_state.value if previous_balance_state else None,
        transition=balance_transition.value if balance_transition else None,
    )

    toasts = transition_toasts(balance_transition, forecast)
    actions = []

    overdue = overdue_payments_action(risk_assessment, settings)
    if overdue is not None:
        actions.append(overdue)
        log.rules(
            "Action queued: PAYMENT_DELAYED",
            count=overdue.payload.params["count"],
            severity=overdue.payload.severity.value,
        )

    month_risk = month_at_risk_action(snapshot, forecast, risk_assessment)
    if month_risk is not None:
        actions.append(month_risk)
        log.rules(f"Action queued: {month_risk.payload.event_type}")

    for action in coverage_risk_actions(forecast, risk_assessment):
        actions.append(action)
        log.rules("Action queued: UPCOMING_EXPENSE_COVERAGE_RISK", expense_id=action.payload.reference_id)

    archives = recovery_archive_actions(snapshot, balance_transition)
    if archives:
        actions.extend(archives)
        log.rules("Action queued: archive month risk notifications", month_key=snapshot.month_key)

    log.rules("Rules evaluation complete", actions=len(actions), toasts=len(toasts))
    return NotificationRulesOutput(actions=tuple(actions), toasts=tuple(toasts))
