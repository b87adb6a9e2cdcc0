"""
Notification Reconciliation

The rule evaluator emits CREATE for every notification that should
exist. Whether that becomes a new row, an update of an open one, or
nothing at all depends on what is already stored. This module is the
pure half of that decision; reading and writing storage stays with the
persistence collaborator.

IDEMPOTENCY RULES:
1. An OPEN notification with the same key exists -> UPDATE it
2. Only a DISMISSED one exists -> SKIP, unless severity escalates
   from warning to action
3. Nothing stored -> CREATE
"""

from datetime import date
from typing import Optional, Union

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.models.notification import (
    CreateAction,
    NotificationPayload,
    NotificationSeverity,
    SkipAction,
    StoredNotificationState,
    TimeWindow,
    UpdateAction,
)


def generate_dedupe_key(
    event_type: str,
    entity_type: str = "generic",
    entity_id: str = "",
    time_window: TimeWindow = TimeWindow.MONTH,
    reference_date: Optional[date] = None,
) -> str:
    """
    Deduplication key for a stored notification.

    Format: {event_type}:{entity_type}:{entity_id}:{time_key}

    Examples:
        MONTH_AT_RISK:month:2026-01:2026-01
        PAYMENT_DELAYED:transaction:overdue_payments:2026-01
    """
    reference_date = reference_date or date.today()
    if time_window == TimeWindow.MONTH:
        time_key = reference_date.strftime("%Y-%m")
    elif time_window == TimeWindow.DAY:
        time_key = reference_date.isoformat()
    else:
        time_key = "always"
    return f"{event_type}:{entity_type}:{entity_id}:{time_key}"


def dedupe_key_for_payload(
    payload: NotificationPayload,
    reference_date: Optional[date] = None,
) -> str:
    """Monthly dedupe key derived from a payload's entity, falling back to its reference id."""
    return generate_dedupe_key(
        payload.event_type,
        payload.entity_type or "generic",
        payload.entity_id or payload.reference_id or "",
        TimeWindow.MONTH,
        reference_date,
    )


def reconcile_with_existing(
    payload: NotificationPayload,
    existing: Optional[StoredNotificationState],
    logger: Optional[DomainLogger] = None,
) -> Union[CreateAction, UpdateAction, SkipAction]:
    """
    Decide what a CREATE from the evaluator means given the stored notification.

    Args:
        payload: The notification the rules want to exist
        existing: The most recent stored notification with the same key, if any
    """
    log = resolve_logger(logger)

    if existing is None:
        return CreateAction(payload=payload)

    if existing.is_open:
        log.rules("Notification already open, updating", event_type=payload.event_type, existing_id=existing.id)
        return UpdateAction(payload=payload, notification_id=existing.id)

    escalates = (
        payload.severity == NotificationSeverity.ACTION
        and existing.severity == NotificationSeverity.WARNING
    )
    if escalates:
        log.rules("State escalation, creating new notification", event_type=payload.event_type)
        return CreateAction(payload=payload)

    log.rules("Notification dismissed without escalation, skipping", event_type=payload.event_type)
    return SkipAction(reason="dismissed")
