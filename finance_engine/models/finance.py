"""
Derived Finance Models

Everything in this module is COMPUTED by the engine, never persisted.
Each model is frozen: recomputing from the same inputs must give an
equal object, and no later stage may patch an earlier stage's output.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from finance_engine.models.transaction import Account, Transaction


FROZEN = ConfigDict(frozen=True)


# =============================================================================
# BALANCE STATE MACHINE
# =============================================================================

class BalanceState(str, Enum):
    """Two-value classification of a month's projected balance."""
    NEGATIVE = "NEGATIVE"
    NON_NEGATIVE = "NON_NEGATIVE"


class BalanceTransition(str, Enum):
    """A meaningful change of BalanceState between two evaluation cycles."""
    NEGATIVE_TO_POSITIVE = "NEGATIVE_TO_POSITIVE"
    POSITIVE_TO_NEGATIVE = "POSITIVE_TO_NEGATIVE"


# =============================================================================
# SNAPSHOT
# =============================================================================

class MonthlySnapshot(BaseModel):
    """
    Monthly financial snapshot.

    CRITICAL: realized means status == confirmed and pending means
    status == planned. The effective date only decides the month.
    """
    model_config = FROZEN

    month_key: str = Field(..., description="YYYY-MM")
    month: dt.date = Field(..., description="First day of the month")

    # Realized (confirmed only)
    income_realized: Decimal
    expense_realized: Decimal
    saldo_mes: Decimal = Field(..., description="income_realized - expense_realized")

    # Planned
    income_planned: Decimal
    expense_planned: Decimal

    # Projected
    saldo_previsto_mes: Decimal = Field(
        ...,
        description="(income realized + planned) - (expense realized + planned)"
    )

    # Counts
    confirmed_count: int = Field(ge=0)
    planned_income_count: int = Field(ge=0)
    planned_expense_count: int = Field(ge=0)
    total_count: int = Field(ge=0)

    confirmed_transactions: tuple[Transaction, ...] = ()
    planned_transactions: tuple[Transaction, ...] = ()


class ForecastState(BaseModel):
    """Forecast and risk indicators derived from a snapshot."""
    model_config = FROZEN

    is_negative: bool
    risk_amount: Decimal = Field(..., ge=0)
    balance_state: BalanceState
    days_until_month_end: int
    is_current_or_future_month: bool
    show_risk_preview: bool


# =============================================================================
# RISK ASSESSMENT
# =============================================================================

class OverdueExpense(BaseModel):
    """A planned expense whose effective date has passed."""
    model_config = FROZEN

    id: str
    description: str = ""
    days_overdue: int = Field(..., ge=1)
    amount: Decimal
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None


class CoverageRiskExpense(BaseModel):
    """An upcoming planned expense larger than the current realized balance."""
    model_config = FROZEN

    id: str
    description: str = ""
    days_until_due: int = Field(..., ge=0)
    amount: Decimal
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None


class RiskAssessment(BaseModel):
    """
    Transaction-level risks.

    Only one category is surfaced at a time: coverage risk is empty
    whenever anything is overdue or the projected balance is negative.
    """
    model_config = FROZEN

    overdue_expenses: tuple[OverdueExpense, ...] = ()
    coverage_risk_expenses: tuple[CoverageRiskExpense, ...] = ()

    @property
    def has_overdue_expenses(self) -> bool:
        return len(self.overdue_expenses) > 0

    @property
    def has_coverage_risk(self) -> bool:
        return len(self.coverage_risk_expenses) > 0


# =============================================================================
# UNIFIED METRICS
# =============================================================================

class UnifiedMonthlyMetrics(BaseModel):
    """Household-wide totals for one month (status-based split)."""
    model_config = FROZEN

    income_realized: Decimal
    expense_realized: Decimal
    balance_realized: Decimal

    income_pending: Decimal
    expense_pending: Decimal

    income_forecast: Decimal
    expense_forecast: Decimal
    balance_forecast: Decimal

    confirmed_count: int = Field(ge=0)
    planned_income_count: int = Field(ge=0)
    planned_expense_count: int = Field(ge=0)
    total_count: int = Field(ge=0)


class PendingTransactionDetail(BaseModel):
    """A planned transaction contributing to an account projection."""
    model_config = FROZEN

    id: str
    date: dt.date
    due_date: Optional[dt.date] = None
    description: Optional[str] = None
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None
    amount: Decimal


class UnifiedAccountMetrics(BaseModel):
    """
    Realized, pending and projected figures for one account.

    realized_balance uses the end-of-current-month cutoff; pending
    figures are status-based up to the end of the selected month.
    """
    model_config = FROZEN

    account: Account
    realized_balance: Decimal
    pending_income: Decimal
    pending_expenses: Decimal
    projected_balance: Decimal
    transaction_count: int = Field(ge=0)
    planned_incomes: tuple[PendingTransactionDetail, ...] = ()
    planned_expenses: tuple[PendingTransactionDetail, ...] = ()

    @property
    def is_negative_projected(self) -> bool:
        return self.projected_balance < 0


class UnifiedTotals(BaseModel):
    """Account figures aggregated overall, for reserves and for available accounts."""
    model_config = FROZEN

    realized_balance: Decimal = Decimal("0")
    projected_balance: Decimal = Decimal("0")
    pending_income: Decimal = Decimal("0")
    pending_expenses: Decimal = Decimal("0")

    reserve_realized_balance: Decimal = Decimal("0")
    reserve_projected_balance: Decimal = Decimal("0")
    reserve_pending_income: Decimal = Decimal("0")
    reserve_pending_expenses: Decimal = Decimal("0")

    available_realized_balance: Decimal = Decimal("0")
    available_projected_balance: Decimal = Decimal("0")
    available_pending_income: Decimal = Decimal("0")
    available_pending_expenses: Decimal = Decimal("0")


class AccountMetricsResult(BaseModel):
    """Per-account projections plus their totals."""
    model_config = FROZEN

    projections: tuple[UnifiedAccountMetrics, ...] = ()
    totals: UnifiedTotals = Field(default_factory=UnifiedTotals)


# =============================================================================
# FUTURE PROJECTION
# =============================================================================

class RiskLevel(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    DANGER = "danger"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FutureEngineInput(BaseModel):
    """
    Inputs of the end-of-month projection.

    DESIGN DECISION: the projection is an estimate built on daily rates,
    so it works in floats rather than Decimal.
    """
    model_config = FROZEN

    current_balance: float = Field(
        ...,
        description="Current available balance (excludes reserves)"
    )
    pending_fixed_expenses: float = Field(
        default=0.0,
        ge=0.0,
        description="Fixed expenses still planned for this month"
    )
    confirmed_variable_this_month: float = Field(
        default=0.0,
        ge=0.0,
        description="Variable expenses already confirmed this month"
    )
    historical_variable_avg: float = Field(
        default=0.0,
        ge=0.0,
        description="Average monthly variable spending over recent months"
    )
    planned_budget_variable: float = Field(
        default=0.0,
        ge=0.0,
        description="Planned variable budget, used when there is no history"
    )
    days_elapsed: int = Field(..., ge=0)
    days_in_month: int = Field(..., ge=0, le=31)
    safety_buffer_percent: Optional[float] = Field(
        default=None,
        ge=0.0,
        le=100.0,
        description="Safety buffer; None means the configured default"
    )


class FutureEngineResult(BaseModel):
    """End-of-month projection."""
    model_config = FROZEN

    estimated_end_of_month: float
    safe_spending_zone: float = Field(..., ge=0.0)
    safety_buffer: float = Field(..., ge=0.0)

    risk_level: RiskLevel
    risk_percentage: float = Field(..., ge=0.0, le=100.0)

    effective_variable_avg: float
    daily_variable_rate: float
    projected_variable_remaining: float
    total_projected_expenses: float
    days_remaining: int = Field(..., ge=0)

    using_budget_fallback: bool
    is_data_sufficient: bool
    confidence_level: ConfidenceLevel
