"""Transaction filters derived from notifications."""

from finance_engine.filters.cta import (
    build_transaction_filters_from_notification,
    build_transaction_url,
    parse_cta_target,
)

__all__ = [
    "build_transaction_filters_from_notification",
    "build_transaction_url",
    "parse_cta_target",
]
