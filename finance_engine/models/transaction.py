"""
Input Records for the Finance Engine

These models define the strict schemas for the records the persistence
layer hands to the engine. They are designed to:
1. Enforce the input contract at construction time (not inside the engine)
2. Be immutable, so no engine stage can mutate what it was given
3. Accept the persistence layer's ISO date strings and numeric strings

DESIGN DECISION: Transactions are never deleted, only soft-cancelled.
A cancelled transaction (status or cancelled_at) is invisible to every
calculation downstream.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of a transaction."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class TransactionStatus(str, Enum):
    """
    Transaction lifecycle status.

    CRITICAL: 'confirmed' is realized money and 'planned' is pending,
    regardless of the transaction date.
    """
    PLANNED = "planned"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ExpenseType(str, Enum):
    """Whether an expense recurs at a fixed amount or varies."""
    FIXED = "fixed"
    VARIABLE = "variable"


# =============================================================================
# CORE RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A household transaction as stored by the persistence layer.

    Category and subcategory names are denormalized here because risk
    items and pending-detail lists report them.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique transaction ID"
    )
    kind: TransactionKind
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount; direction comes from kind"
    )
    date: dt.date = Field(
        ...,
        description="Entry date"
    )
    due_date: Optional[dt.date] = Field(
        default=None,
        description="Obligation due date (takes precedence for expenses)"
    )
    status: TransactionStatus = TransactionStatus.PLANNED
    cancelled_at: Optional[dt.datetime] = None

    account_id: str = Field(
        ...,
        min_length=1,
        description="Source account (or destination for income)"
    )
    to_account_id: Optional[str] = Field(
        default=None,
        description="Destination account for transfers"
    )

    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    category_name: Optional[str] = None
    subcategory_name: Optional[str] = None
    expense_type: Optional[ExpenseType] = None
    description: Optional[str] = Field(
        default=None,
        max_length=500,
    )

    @property
    def is_cancelled(self) -> bool:
        """Cancelled either by status or by a cancellation timestamp."""
        return self.status == TransactionStatus.CANCELLED or self.cancelled_at is not None

    @property
    def is_confirmed(self) -> bool:
        return self.status == TransactionStatus.CONFIRMED

    @property
    def is_planned(self) -> bool:
        return self.status == TransactionStatus.PLANNED


class Account(BaseModel):
    """
    A household account.

    Reserve accounts are excluded from "available" totals but included
    in grand totals.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    is_reserve: bool = False
    is_active: bool = True
    name: Optional[str] = Field(default=None, max_length=200)
    type: Optional[str] = Field(default=None, max_length=50)
