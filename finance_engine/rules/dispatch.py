"""
Action Dispatch

The consumer side of the closed action sum type. A persistence
collaborator implements NotificationActionHandler; dispatch_actions
routes every action to exactly one handler method.
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from finance_engine.models.notification import (
    ArchiveAction,
    CreateAction,
    NotificationPayload,
    SkipAction,
    ToastAction,
    ToastPayload,
    UpdateAction,
)


class FinanceEngineError(Exception):
    """Base error for the finance engine."""
    pass


class UnknownActionError(FinanceEngineError):
    """An object that is not a notification rule action was dispatched."""
    pass


class NotificationActionHandler(ABC):
    """
    Abstract interface for applying rule actions.

    Any persistence implementation (database, in-memory, ...) must
    implement these methods. The engine never calls them itself.
    """

    @abstractmethod
    def create(self, payload: NotificationPayload) -> None:
        """Create (upsert) a notification keyed by (event_type, reference_id)."""
        pass

    @abstractmethod
    def update(self, payload: NotificationPayload, notification_id: Optional[str]) -> None:
        """Refresh an open notification."""
        pass

    @abstractmethod
    def archive(self, event_type: str, reference_id: str) -> None:
        """Soft-retire a notification family."""
        pass

    @abstractmethod
    def toast(self, payload: ToastPayload) -> None:
        """Show a transient message."""
        pass

    def skip(self, reason: Optional[str]) -> None:
        """Nothing to do. Override to trace skipped actions."""
        return None


def dispatch_actions(actions: Iterable[object], handler: NotificationActionHandler) -> int:
    """
    Apply actions in order.

    Returns the number of actions dispatched.

    Raises:
        UnknownActionError: If an element is not one of the five action types
    """
    count = 0
    for action in actions:
        if isinstance(action, CreateAction):
            handler.create(action.payload)
        elif isinstance(action, UpdateAction):
            handler.update(action.payload, action.notification_id)
        elif isinstance(action, ArchiveAction):
            handler.archive(action.event_type, action.reference_id)
        elif isinstance(action, ToastAction):
            handler.toast(action.payload)
        elif isinstance(action, SkipAction):
            handler.skip(action.reason)
        else:
            raise UnknownActionError(f"Unsupported notification action: {type(action).__name__}")
        count += 1
    return count
