"""
Monthly Snapshot Builder

STRICT STATUS-BASED LOGIC:
1. "Realized" = status == confirmed (REGARDLESS of date)
2. "Pending" = status == planned (REGARDLESS of date)

Confirming an obligation moves it out of pending immediately: no
double counting and no comparison against today.

NOTE: Account balance reconciliation is date-sensitive and lives in
unified_metrics, not here.
"""

from decimal import Decimal
from datetime import date
from typing import Iterable, Optional

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.calculations.dates import is_active, is_in_month, month_key, month_start
from finance_engine.models.finance import MonthlySnapshot
from finance_engine.models.transaction import Transaction, TransactionKind


ZERO = Decimal("0")


def sum_amounts(transactions: Iterable[Transaction], kind: TransactionKind) -> Decimal:
    """Sum the amounts of transactions of one kind."""
    return sum((t.amount for t in transactions if t.kind == kind), ZERO)


def count_kind(transactions: Iterable[Transaction], kind: TransactionKind) -> int:
    return sum(1 for t in transactions if t.kind == kind)


def compute_monthly_snapshot(
    transactions: Iterable[Transaction],
    month: date,
    logger: Optional[DomainLogger] = None,
) -> MonthlySnapshot:
    """
    Compute the monthly snapshot from transactions.

    Args:
        transactions: All transactions (cancelled ones are dropped here)
        month: Any day of the target month

    Returns:
        MonthlySnapshot with realized, planned and projected figures
    """
    log = resolve_logger(logger)
    transactions = tuple(transactions)
    key = month_key(month)

    log.snapshot("Computing snapshot", month_key=key, total_transactions=len(transactions))

    in_month = [t for t in transactions if is_active(t) and is_in_month(t, month)]

    confirmed = tuple(t for t in in_month if t.is_confirmed)
    planned = tuple(t for t in in_month if t.is_planned)

    income_realized = sum_amounts(confirmed, TransactionKind.INCOME)
    expense_realized = sum_amounts(confirmed, TransactionKind.EXPENSE)
    income_planned = sum_amounts(planned, TransactionKind.INCOME)
    expense_planned = sum_amounts(planned, TransactionKind.EXPENSE)

    saldo_mes = income_realized - expense_realized
    saldo_previsto_mes = (income_realized + income_planned) - (expense_realized + expense_planned)

    snapshot = MonthlySnapshot(
        month_key=key,
        month=month_start(month),
        income_realized=income_realized,
        expense_realized=expense_realized,
        saldo_mes=saldo_mes,
        income_planned=income_planned,
        expense_planned=expense_planned,
        saldo_previsto_mes=saldo_previsto_mes,
        confirmed_count=len(confirmed),
        planned_income_count=count_kind(planned, TransactionKind.INCOME),
        planned_expense_count=count_kind(planned, TransactionKind.EXPENSE),
        total_count=len(in_month),
        confirmed_transactions=confirmed,
        planned_transactions=planned,
    )

    log.snapshot(
        "Snapshot computed",
        month_key=key,
        income_realized=str(income_realized),
        expense_realized=str(expense_realized),
        saldo_mes=str(saldo_mes),
        income_planned=str(income_planned),
        expense_planned=str(expense_planned),
        saldo_previsto_mes=str(saldo_previsto_mes),
        confirmed_count=snapshot.confirmed_count,
    )

    return snapshot
