"""Metadata parsing and sanitization package."""

from finance_engine.validation.metadata import (
    ALLOWED_NOTIFICATION_METADATA_KEYS,
    ALLOWED_NOTIFICATION_PARAMS_KEYS,
    ALLOWED_RISK_EVENT_METADATA_KEYS,
    merge_notification_params,
    safe_parse_json_object,
    sanitize_notification_metadata,
    sanitize_notification_params,
    sanitize_risk_event_metadata,
    sanitize_with_allowlist,
)

__all__ = [
    "ALLOWED_NOTIFICATION_METADATA_KEYS",
    "ALLOWED_NOTIFICATION_PARAMS_KEYS",
    "ALLOWED_RISK_EVENT_METADATA_KEYS",
    "merge_notification_params",
    "safe_parse_json_object",
    "sanitize_notification_metadata",
    "sanitize_notification_params",
    "sanitize_risk_event_metadata",
    "sanitize_with_allowlist",
]
