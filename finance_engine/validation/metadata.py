"""
Notification Metadata Handling

Two concerns, both tolerant by design:

1. READING: stored notifications carry params and legacy metadata that
   may be dicts, JSON strings or double-encoded JSON strings. Parsing
   never raises; anything unreadable becomes an empty bag.
2. WRITING: before metadata/params reach storage they are reduced to an
   allowlist of keys with primitive values, under a size limit.

IMPORTANT: Sanitization drops data, it never rewrites it.
"""

import json
from typing import Any, Iterable, Mapping, Optional

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.config import EngineSettings, get_settings


# =============================================================================
# ALLOWLISTS
# =============================================================================

ALLOWED_RISK_EVENT_METADATA_KEYS = (
    "rule_key",
    "severity",
    "scope",
    "month",
    "account_id",
    "category_id",
    "budget_id",
    "transaction_id",
)

ALLOWED_NOTIFICATION_METADATA_KEYS = (
    "template_key",
    "severity",
    "month",
    "entity_type",
    "entity_id",
)

ALLOWED_NOTIFICATION_PARAMS_KEYS = (
    "category_name",
    "account_name",
    "title_key",
    "body_key",
)

# (target, source): copy source into target when target is missing
PARAM_ALIASES = (
    ("subcategoryName", "description"),
    ("daysOverdue", "days"),
)


# =============================================================================
# READING
# =============================================================================

def safe_parse_json_object(data: Any, logger: Optional[DomainLogger] = None) -> dict[str, Any]:
    """
    Parse a JSON object permissively.

    Accepts a mapping, a JSON string, or a JSON string wrapped in
    another layer of quotes. Returns {} for anything else.
    """
    if not data:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    if not isinstance(data, str):
        return {}

    text = data
    if text.startswith('"') and text.endswith('"'):
        try:
            unwrapped = json.loads(text)
        except ValueError:
            unwrapped = text
        if isinstance(unwrapped, str):
            text = unwrapped

    try:
        parsed = json.loads(text)
    except ValueError as e:
        resolve_logger(logger).filter("Failed to parse notification params", level="warning", error=str(e))
        return {}
    return parsed if isinstance(parsed, dict) else {}


def merge_notification_params(
    metadata: Any,
    params: Any,
    logger: Optional[DomainLogger] = None,
) -> dict[str, Any]:
    """
    Merge legacy metadata and params into one interpolation bag.

    Precedence: params override metadata. Aliases then backfill keys
    older notifications stored under different names.
    """
    merged = {
        **safe_parse_json_object(metadata, logger),
        **safe_parse_json_object(params, logger),
    }

    for target, source in PARAM_ALIASES:
        if merged.get(source) and not merged.get(target):
            merged[target] = merged[source]

    if merged.get("description") and not merged.get("categoryName"):
        merged["categoryName"] = ""

    return merged


# =============================================================================
# WRITING
# =============================================================================

def _is_primitive(value: Any) -> bool:
    return isinstance(value, (str, int, float, bool))


def sanitize_with_allowlist(
    data: Any,
    allowed_keys: Iterable[str],
    settings: Optional[EngineSettings] = None,
) -> dict[str, Any]:
    """
    Keep only allowed keys with primitive, non-null values.

    Rules:
    1. Input must be a mapping, otherwise {}
    2. Unknown keys, None values, lists and nested objects are dropped
    3. If the serialized result exceeds metadata_max_bytes, {}
    """
    settings = settings or get_settings()
    if not isinstance(data, Mapping):
        return {}

    allowed = set(allowed_keys)
    result = {
        key: value
        for key, value in data.items()
        if key in allowed and value is not None and _is_primitive(value)
    }

    if len(json.dumps(result).encode("utf-8")) > settings.metadata_max_bytes:
        return {}
    return result


def sanitize_notification_metadata(data: Any, settings: Optional[EngineSettings] = None) -> dict[str, Any]:
    return sanitize_with_allowlist(data, ALLOWED_NOTIFICATION_METADATA_KEYS, settings)


def sanitize_notification_params(data: Any, settings: Optional[EngineSettings] = None) -> dict[str, Any]:
    return sanitize_with_allowlist(data, ALLOWED_NOTIFICATION_PARAMS_KEYS, settings)


def sanitize_risk_event_metadata(data: Any, settings: Optional[EngineSettings] = None) -> dict[str, Any]:
    return sanitize_with_allowlist(data, ALLOWED_RISK_EVENT_METADATA_KEYS, settings)
