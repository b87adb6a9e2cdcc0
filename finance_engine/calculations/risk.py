"""
Risk Assessment Engine

Scans transactions for:
1. OVERDUE obligations: planned expenses whose effective date has passed
2. COVERAGE RISK: planned expenses due soon that the current realized
   balance cannot cover

PRIORITY POLICY: coverage risk is only evaluated when nothing is
overdue and the projected balance is non-negative. Only one risk
category is surfaced at a time, highest severity first.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.calculations.dates import get_effective_date, is_active
from finance_engine.config import EngineSettings, get_settings
from finance_engine.models.finance import (
    CoverageRiskExpense,
    OverdueExpense,
    RiskAssessment,
)
from finance_engine.models.transaction import Transaction, TransactionKind


def _is_planned_expense(transaction: Transaction) -> bool:
    return (
        is_active(transaction)
        and transaction.is_planned
        and transaction.kind == TransactionKind.EXPENSE
    )


def find_overdue_expenses(
    transactions: Iterable[Transaction],
    today: date,
) -> list[OverdueExpense]:
    """Planned expenses with an effective date before today."""
    overdue = []
    for t in transactions:
        if not _is_planned_expense(t):
            continue
        effective = get_effective_date(t)
        if effective >= today:
            continue
        overdue.append(OverdueExpense(
            id=t.id,
            description=t.description or "",
            days_overdue=(today - effective).days,
            amount=t.amount,
            category_name=t.category_name,
            subcategory_name=t.subcategory_name,
        ))
    return overdue


def find_coverage_risk_expenses(
    transactions: Iterable[Transaction],
    realized_balance: Decimal,
    today: date,
    settings: EngineSettings,
) -> list[CoverageRiskExpense]:
    """Planned expenses due within the coverage window that exceed the realized balance."""
    at_risk = []
    for t in transactions:
        if not _is_planned_expense(t):
            continue
        days_until_due = (get_effective_date(t) - today).days
        if not settings.coverage_window_min_days <= days_until_due <= settings.coverage_window_max_days:
            continue
        if t.amount <= realized_balance:
            continue
        at_risk.append(CoverageRiskExpense(
            id=t.id,
            description=t.description or "",
            days_until_due=days_until_due,
            amount=t.amount,
            category_name=t.category_name,
            subcategory_name=t.subcategory_name,
        ))
    return at_risk


def compute_risk_assessment(
    transactions: Iterable[Transaction],
    realized_balance: Decimal,
    projected_balance: Decimal,
    reference_date: Optional[date] = None,
    settings: Optional[EngineSettings] = None,
    logger: Optional[DomainLogger] = None,
) -> RiskAssessment:
    """
    Compute risk assessment from transactions.

    Args:
        transactions: Transactions to scan (cancelled ones are ignored)
        realized_balance: Current realized (available) balance
        projected_balance: Projected balance; negative suppresses coverage risk
        reference_date: "Today" (defaults to date.today())
    """
    log = resolve_logger(logger)
    settings = settings or get_settings()
    today = reference_date or date.today()
    transactions = tuple(transactions)

    log.risk(
        "Computing risk assessment",
        transaction_count=len(transactions),
        realized_balance=str(realized_balance),
        projected_balance=str(projected_balance),
    )

    overdue = find_overdue_expenses(transactions, today)

    coverage_risk: list[CoverageRiskExpense] = []
    if not overdue and projected_balance >= 0:
        coverage_risk = find_coverage_risk_expenses(transactions, realized_balance, today, settings)

    assessment = RiskAssessment(
        overdue_expenses=tuple(overdue),
        coverage_risk_expenses=tuple(coverage_risk),
    )

    log.risk(
        "Risk assessment computed",
        overdue_count=len(overdue),
        coverage_risk_count=len(coverage_risk),
    )
    return assessment
