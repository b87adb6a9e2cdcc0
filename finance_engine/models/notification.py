"""
Notification Models - MESSAGE CONTRACT

CRITICAL: The engine never materializes notification text. A notification
is a message key plus JSON-serializable params; the localization layer
renders it later.

DESIGN DECISION: Rule actions form a closed sum type
(Create | Update | Archive | Toast | Skip) discriminated on `type`.
Consumers match on the class, not on string tags.
"""

from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer, field_validator

from finance_engine.validation.metadata import safe_parse_json_object


FROZEN = ConfigDict(frozen=True)

# Scalars, strings and arrays of ids. Never pre-formatted currency or dates.
ParamValue = Union[bool, int, float, str, tuple[str, ...], None]

# Read-only once validated; dumps back to a plain dict.
Params = Annotated[
    Mapping[str, ParamValue],
    AfterValidator(MappingProxyType),
    PlainSerializer(dict, return_type=dict),
]


# =============================================================================
# ENUMS
# =============================================================================

class EventType(str, Enum):
    """Notification families, keyed together with a reference id."""
    PAYMENT_DELAYED = "PAYMENT_DELAYED"
    MONTH_AT_RISK = "MONTH_AT_RISK"
    MONTH_AT_RISK_PREVIEW = "MONTH_AT_RISK_PREVIEW"
    UPCOMING_EXPENSE_COVERAGE_RISK = "UPCOMING_EXPENSE_COVERAGE_RISK"
    RECURRING_LATE_PAYMENT = "RECURRING_LATE_PAYMENT"
    MISSING_RECURRING_EXPENSE = "MISSING_RECURRING_EXPENSE"


class NotificationSeverity(str, Enum):
    ACTION = "action"
    WARNING = "warning"
    SUCCESS = "success"
    INFO = "info"


class ToastVariant(str, Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class TimeWindow(str, Enum):
    """Deduplication window for stored notifications."""
    MONTH = "month"
    DAY = "day"
    NONE = "none"


# =============================================================================
# PAYLOADS
# =============================================================================

class NotificationPayload(BaseModel):
    """
    A notification to upsert, keyed by (event_type, reference_id).

    params is read-only after construction; model_dump returns a plain dict.
    """
    model_config = FROZEN

    event_type: str
    reference_id: str

    # Message Contract
    message_key: str = Field(..., min_length=1)
    params: Params = Field(default_factory=dict, validate_default=True)
    severity: NotificationSeverity

    # Entity info
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    # Call to action
    cta_label_key: Optional[str] = None
    cta_target: Optional[str] = None


class ToastPayload(BaseModel):
    """A transient message to show once."""
    model_config = FROZEN

    variant: ToastVariant = ToastVariant.DEFAULT
    title_key: str
    description_key: str
    params: Params = Field(default_factory=dict, validate_default=True)


# =============================================================================
# RULE ACTIONS (closed sum type)
# =============================================================================

class CreateAction(BaseModel):
    model_config = FROZEN

    type: Literal["CREATE"] = "CREATE"
    payload: NotificationPayload


class UpdateAction(BaseModel):
    model_config = FROZEN

    type: Literal["UPDATE"] = "UPDATE"
    payload: NotificationPayload
    notification_id: Optional[str] = Field(
        default=None,
        description="Stored notification to update, when known"
    )


class ArchiveAction(BaseModel):
    model_config = FROZEN

    type: Literal["ARCHIVE"] = "ARCHIVE"
    event_type: str
    reference_id: str


class ToastAction(BaseModel):
    model_config = FROZEN

    type: Literal["TOAST"] = "TOAST"
    payload: ToastPayload


class SkipAction(BaseModel):
    model_config = FROZEN

    type: Literal["SKIP"] = "SKIP"
    reason: Optional[str] = None


NotificationRuleAction = Annotated[
    Union[CreateAction, UpdateAction, ArchiveAction, ToastAction, SkipAction],
    Field(discriminator="type"),
]


class NotificationRulesOutput(BaseModel):
    """Everything one rule evaluation asks the caller to do."""
    model_config = FROZEN

    actions: tuple[NotificationRuleAction, ...] = ()
    toasts: tuple[ToastPayload, ...] = ()

    def all_actions(self) -> list[Union[CreateAction, UpdateAction, ArchiveAction, ToastAction, SkipAction]]:
        """Toasts first, then notification actions, in evaluation order."""
        return [ToastAction(payload=toast) for toast in self.toasts] + list(self.actions)


# =============================================================================
# PERSISTENCE VIEW (for reconciliation only)
# =============================================================================

class StoredNotificationState(BaseModel):
    """The slice of a stored notification needed to decide create vs update."""
    model_config = FROZEN

    id: str
    severity: NotificationSeverity
    dismissed_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.dismissed_at is None


# =============================================================================
# TRANSACTION FILTERS
# =============================================================================

FilterView = Literal["overdue", "month_pending", "late_pattern"]
FilterStatus = Literal["confirmed", "planned", "cancelled", "all"]


class TransactionFilter(BaseModel):
    """Filter descriptor consumable by any transaction listing UI."""
    model_config = FROZEN

    view: Optional[FilterView] = None
    status: Optional[FilterStatus] = None
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    month: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class NotificationContext(BaseModel):
    """What the UI knows about a notification the user acted on."""
    model_config = FROZEN

    event_type: str
    reference_id: Optional[str] = None
    cta_target: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def parse_metadata(cls, v: Any) -> dict[str, Any]:
        """Stored metadata may be a dict, a JSON string, or missing."""
        return safe_parse_json_object(v)
