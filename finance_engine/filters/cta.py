"""
Notification Call-To-Action Filters

Turns the notification a user clicked into a transaction-list filter.

DESIGN DECISION: The CTA target stored on the notification wins, even
when it carries no filter parameters (e.g. highlight links). The
event-type table is only used when no target was stored.
"""

from typing import Any, Callable, Optional, get_args
from urllib.parse import parse_qs, urlencode, urlsplit

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.models import (
    EventType,
    FilterStatus,
    FilterView,
    NotificationContext,
    TransactionFilter,
)


TRANSACTIONS_PATH = "/transactions"

VALID_VIEWS = frozenset(get_args(FilterView))
VALID_STATUSES = frozenset(get_args(FilterStatus))

# Query parameter names, in lookup order
QUERY_KEYS = {
    "view": ("view",),
    "status": ("status",),
    "category_id": ("category", "filter_category"),
    "subcategory_id": ("subcategory", "filter_subcategory"),
    "month": ("month",),
}


# =============================================================================
# PARSING
# =============================================================================

def _first(query: dict[str, list[str]], names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        values = query.get(name)
        if values and values[0]:
            return values[0]
    return None


def parse_cta_target(cta_target: Any, logger: Optional[DomainLogger] = None) -> TransactionFilter:
    """
    Parse a CTA target like "/transactions?view=overdue&month=2025-01".

    Unknown views/statuses are ignored. Malformed input yields an
    empty filter rather than an error.
    """
    log = resolve_logger(logger)
    if not cta_target or not isinstance(cta_target, str):
        return TransactionFilter()

    try:
        query = parse_qs(urlsplit(cta_target).query)
    except ValueError as e:
        log.filter("Malformed CTA target", level="warning", cta_target=cta_target, error=str(e))
        return TransactionFilter()

    fields = {field: _first(query, names) for field, names in QUERY_KEYS.items()}
    if fields["view"] not in VALID_VIEWS:
        fields["view"] = None
    if fields["status"] not in VALID_STATUSES:
        fields["status"] = None

    result = TransactionFilter(**fields)
    log.filter("Parsed CTA target", cta_target=cta_target, filter=result.model_dump(exclude_none=True))
    return result


# =============================================================================
# EVENT FALLBACKS
# =============================================================================

def _metadata_value(metadata: dict[str, Any], *names: str) -> Optional[str]:
    for name in names:
        value = metadata.get(name)
        if value:
            return str(value)
    return None


def _overdue(context: NotificationContext, metadata: dict[str, Any]) -> TransactionFilter:
    return TransactionFilter(view="overdue", status="planned")


def _month_pending(context: NotificationContext, metadata: dict[str, Any]) -> TransactionFilter:
    return TransactionFilter(view="month_pending", status="planned", month=context.reference_id)


def _planned(context: NotificationContext, metadata: dict[str, Any]) -> TransactionFilter:
    return TransactionFilter(status="planned")


def _late_pattern(context: NotificationContext, metadata: dict[str, Any]) -> TransactionFilter:
    return TransactionFilter(
        view="late_pattern",
        category_id=_metadata_value(metadata, "categoryId", "category_id"),
        subcategory_id=_metadata_value(metadata, "subcategoryId", "subcategory_id"),
    )


def _missing_recurring(context: NotificationContext, metadata: dict[str, Any]) -> TransactionFilter:
    return TransactionFilter(
        status="planned",
        category_id=_metadata_value(metadata, "categoryId", "category_id"),
    )


EVENT_FILTERS: dict[str, Callable[[NotificationContext, dict[str, Any]], TransactionFilter]] = {
    EventType.PAYMENT_DELAYED.value: _overdue,
    EventType.MONTH_AT_RISK.value: _month_pending,
    EventType.MONTH_AT_RISK_PREVIEW.value: _month_pending,
    EventType.UPCOMING_EXPENSE_COVERAGE_RISK.value: _planned,
    EventType.RECURRING_LATE_PAYMENT.value: _late_pattern,
    EventType.MISSING_RECURRING_EXPENSE.value: _missing_recurring,
}


def build_transaction_filters_from_notification(
    context: NotificationContext,
    logger: Optional[DomainLogger] = None,
) -> TransactionFilter:
    """Resolve the filter for a clicked notification."""
    log = resolve_logger(logger)

    if context.cta_target:
        return parse_cta_target(context.cta_target, logger)

    builder = EVENT_FILTERS.get(context.event_type)
    if builder is None:
        log.filter("No filter for event type", event_type=context.event_type)
        return TransactionFilter()

    result = builder(context, context.metadata)
    log.filter(
        "Filter from event type",
        event_type=context.event_type,
        filter=result.model_dump(exclude_none=True),
    )
    return result


def build_transaction_url(transaction_filter: TransactionFilter) -> str:
    """Serialize a filter back into a transactions-page URL."""
    query = {
        QUERY_KEYS[field][0]: value
        for field, value in transaction_filter.model_dump().items()
        if value
    }
    if not query:
        return TRANSACTIONS_PATH
    return f"{TRANSACTIONS_PATH}?{urlencode(query)}"
