"""
Unified Financial Metrics - single source of truth for totals

Used for household cards (monthly metrics) and for per-account
projections.

RULES:
1. Cancelled transactions are ALWAYS excluded
2. Monthly cards: realized = confirmed, pending = planned (date irrelevant)
3. Account balance: confirmed AND effective date <= end of the CURRENT
   calendar month (relative to reference_date)
4. Account pending: planned AND effective date <= end of the SELECTED month
5. Transfers between two available accounts net to zero in the
   available total; transfers touching a reserve account do not
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from finance_engine.audit import DomainLogger, resolve_logger
from finance_engine.calculations.dates import (
    get_effective_date,
    is_active,
    is_effective_date_within_current_month,
    is_in_month,
    month_end,
    month_key,
)
from finance_engine.calculations.snapshot import ZERO, count_kind, sum_amounts
from finance_engine.models.finance import (
    AccountMetricsResult,
    PendingTransactionDetail,
    UnifiedAccountMetrics,
    UnifiedMonthlyMetrics,
    UnifiedTotals,
)
from finance_engine.models.transaction import Account, Transaction, TransactionKind


def compute_unified_monthly_metrics(
    transactions: Iterable[Transaction],
    month: date,
    logger: Optional[DomainLogger] = None,
) -> UnifiedMonthlyMetrics:
    """Household-wide realized, pending and forecast totals for a month."""
    log = resolve_logger(logger)

    in_month = [t for t in transactions if is_active(t) and is_in_month(t, month)]
    confirmed = [t for t in in_month if t.is_confirmed]
    planned = [t for t in in_month if t.is_planned]

    income_realized = sum_amounts(confirmed, TransactionKind.INCOME)
    expense_realized = sum_amounts(confirmed, TransactionKind.EXPENSE)
    income_pending = sum_amounts(planned, TransactionKind.INCOME)
    expense_pending = sum_amounts(planned, TransactionKind.EXPENSE)

    income_forecast = income_realized + income_pending
    expense_forecast = expense_realized + expense_pending

    metrics = UnifiedMonthlyMetrics(
        income_realized=income_realized,
        expense_realized=expense_realized,
        balance_realized=income_realized - expense_realized,
        income_pending=income_pending,
        expense_pending=expense_pending,
        income_forecast=income_forecast,
        expense_forecast=expense_forecast,
        balance_forecast=income_forecast - expense_forecast,
        confirmed_count=len(confirmed),
        planned_income_count=count_kind(planned, TransactionKind.INCOME),
        planned_expense_count=count_kind(planned, TransactionKind.EXPENSE),
        total_count=len(in_month),
    )

    log.snapshot(
        "Unified monthly metrics computed",
        month_key=month_key(month),
        balance_realized=str(metrics.balance_realized),
        balance_forecast=str(metrics.balance_forecast),
    )
    return metrics


def _pending_detail(transaction: Transaction) -> PendingTransactionDetail:
    return PendingTransactionDetail(
        id=transaction.id,
        date=transaction.date,
        due_date=transaction.due_date,
        description=transaction.description,
        category_name=transaction.category_name,
        subcategory_name=transaction.subcategory_name,
        amount=transaction.amount,
    )


def _realized_delta(transaction: Transaction, account_id: str) -> tuple[Decimal, int]:
    """
    Signed effect of a confirmed transaction on one account.

    Returns (delta, legs) where legs is how many sides of the
    transaction touch the account.
    """
    amount = transaction.amount
    if transaction.kind == TransactionKind.TRANSFER:
        delta, legs = ZERO, 0
        if transaction.account_id == account_id:
            delta -= amount
            legs += 1
        if transaction.to_account_id == account_id:
            delta += amount
            legs += 1
        return delta, legs

    if transaction.account_id != account_id:
        return ZERO, 0
    if transaction.kind == TransactionKind.INCOME:
        return amount, 1
    return -amount, 1


def _account_metrics(
    account: Account,
    transactions: list[Transaction],
    selected_month_end: date,
    reference_date: date,
) -> UnifiedAccountMetrics:
    realized_balance = ZERO
    pending_income = ZERO
    pending_expenses = ZERO
    transaction_count = 0
    planned_incomes: list[PendingTransactionDetail] = []
    planned_expenses: list[PendingTransactionDetail] = []

    for t in transactions:
        if t.is_confirmed and is_effective_date_within_current_month(t, reference_date):
            delta, legs = _realized_delta(t, account.id)
            realized_balance += delta
            transaction_count += legs

        # Pending transfers are neither pending income nor pending expense
        if t.is_planned and get_effective_date(t) <= selected_month_end and t.account_id == account.id:
            if t.kind == TransactionKind.INCOME:
                pending_income += t.amount
                planned_incomes.append(_pending_detail(t))
            elif t.kind == TransactionKind.EXPENSE:
                pending_expenses += t.amount
                planned_expenses.append(_pending_detail(t))

    planned_incomes.sort(key=lambda d: d.amount, reverse=True)
    planned_expenses.sort(key=lambda d: d.amount, reverse=True)

    return UnifiedAccountMetrics(
        account=account,
        realized_balance=realized_balance,
        pending_income=pending_income,
        pending_expenses=pending_expenses,
        projected_balance=realized_balance + pending_income - pending_expenses,
        transaction_count=transaction_count,
        planned_incomes=tuple(planned_incomes),
        planned_expenses=tuple(planned_expenses),
    )


def _aggregate_totals(projections: Iterable[UnifiedAccountMetrics]) -> UnifiedTotals:
    totals = {name: ZERO for name in UnifiedTotals.model_fields}
    figures = ("realized_balance", "projected_balance", "pending_income", "pending_expenses")

    for p in projections:
        scope = "reserve" if p.account.is_reserve else "available"
        for figure in figures:
            value = getattr(p, figure)
            totals[figure] += value
            totals[f"{scope}_{figure}"] += value

    return UnifiedTotals(**totals)


def compute_unified_account_metrics(
    transactions: Iterable[Transaction],
    accounts: Iterable[Account],
    month: date,
    reference_date: Optional[date] = None,
    logger: Optional[DomainLogger] = None,
) -> AccountMetricsResult:
    """
    Per-account metrics and totals.

    Args:
        transactions: All transactions (cancelled ones are dropped here)
        accounts: Accounts to report on, in the order to report them
        month: Selected month; pending figures go up to its last day
        reference_date: "Today"; realized balances go up to the end of
                        its month. Defaults to date.today().
    """
    log = resolve_logger(logger)
    reference_date = reference_date or date.today()
    valid = [t for t in transactions if is_active(t)]
    selected_month_end = month_end(month)

    projections = tuple(
        _account_metrics(account, valid, selected_month_end, reference_date)
        for account in accounts
    )
    totals = _aggregate_totals(projections)

    log.snapshot(
        "Unified account metrics computed",
        month_key=month_key(month),
        account_count=len(projections),
        available_realized_balance=str(totals.available_realized_balance),
        available_projected_balance=str(totals.available_projected_balance),
    )
    return AccountMetricsResult(projections=projections, totals=totals)
