"""Notification rules package."""

from finance_engine.rules.dispatch import (
    FinanceEngineError,
    NotificationActionHandler,
    UnknownActionError,
    dispatch_actions,
)
from finance_engine.rules.evaluator import OVERDUE_REFERENCE_ID, evaluate_notification_rules
from finance_engine.rules.reconciliation import (
    dedupe_key_for_payload,
    generate_dedupe_key,
    reconcile_with_existing,
)

__all__ = [
    "FinanceEngineError",
    "NotificationActionHandler",
    "OVERDUE_REFERENCE_ID",
    "UnknownActionError",
    "dedupe_key_for_payload",
    "dispatch_actions",
    "evaluate_notification_rules",
    "generate_dedupe_key",
    "reconcile_with_existing",
]
