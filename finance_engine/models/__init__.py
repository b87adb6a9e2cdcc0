"""
Data Models Package

This package contains all Pydantic models used by the finance engine.
Inputs come from the persistence layer; everything else is derived.
"""

from finance_engine.models.transaction import (
    Account,
    ExpenseType,
    Transaction,
    TransactionKind,
    TransactionStatus,
)
from finance_engine.models.finance import (
    AccountMetricsResult,
    BalanceState,
    BalanceTransition,
    ConfidenceLevel,
    CoverageRiskExpense,
    ForecastState,
    FutureEngineInput,
    FutureEngineResult,
    MonthlySnapshot,
    OverdueExpense,
    PendingTransactionDetail,
    RiskAssessment,
    RiskLevel,
    UnifiedAccountMetrics,
    UnifiedMonthlyMetrics,
    UnifiedTotals,
)
from finance_engine.models.notification import (
    ArchiveAction,
    CreateAction,
    EventType,
    FilterStatus,
    FilterView,
    NotificationContext,
    NotificationPayload,
    NotificationRuleAction,
    NotificationRulesOutput,
    NotificationSeverity,
    SkipAction,
    StoredNotificationState,
    TimeWindow,
    ToastAction,
    ToastPayload,
    ToastVariant,
    TransactionFilter,
    UpdateAction,
)

__all__ = [
    # Input records
    "Account",
    "ExpenseType",
    "Transaction",
    "TransactionKind",
    "TransactionStatus",
    # Derived finance models
    "AccountMetricsResult",
    "BalanceState",
    "BalanceTransition",
    "ConfidenceLevel",
    "CoverageRiskExpense",
    "ForecastState",
    "FutureEngineInput",
    "FutureEngineResult",
    "MonthlySnapshot",
    "OverdueExpense",
    "PendingTransactionDetail",
    "RiskAssessment",
    "RiskLevel",
    "UnifiedAccountMetrics",
    "UnifiedMonthlyMetrics",
    "UnifiedTotals",
    # Notification models
    "ArchiveAction",
    "CreateAction",
    "EventType",
    "FilterStatus",
    "FilterView",
    "NotificationContext",
    "NotificationPayload",
    "NotificationRuleAction",
    "NotificationRulesOutput",
    "NotificationSeverity",
    "SkipAction",
    "StoredNotificationState",
    "TimeWindow",
    "ToastAction",
    "ToastPayload",
    "ToastVariant",
    "TransactionFilter",
    "UpdateAction",
]
