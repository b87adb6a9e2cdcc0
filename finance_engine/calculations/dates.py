"""
Effective-Date Resolution and Month Arithmetic

Every stage of the engine assigns transactions to months through
get_effective_date. Two stages disagreeing on which date is
authoritative would be a defect, so nothing else reads tx.date or
tx.due_date for that purpose.
"""

import calendar
from datetime import date

from finance_engine.models.transaction import Transaction, TransactionKind


def get_effective_date(transaction: Transaction) -> date:
    """
    Accounting date of a transaction.

    - EXPENSE: due_date when present, else date
    - INCOME / TRANSFER: date
    """
    if transaction.kind == TransactionKind.EXPENSE and transaction.due_date:
        return transaction.due_date
    return transaction.date


def month_start(month: date) -> date:
    return month.replace(day=1)


def month_end(month: date) -> date:
    return month.replace(day=days_in_month(month))


def month_bounds(month: date) -> tuple[date, date]:
    """First and last day of the month containing `month`."""
    return month_start(month), month_end(month)


def days_in_month(month: date) -> int:
    return calendar.monthrange(month.year, month.month)[1]


def month_key(month: date) -> str:
    """YYYY-MM key for the month containing `month`."""
    return month.strftime("%Y-%m")


def shift_month(month: date, months: int) -> date:
    """First day of the month `months` away from `month`."""
    index = month.year * 12 + (month.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def is_in_month(transaction: Transaction, month: date) -> bool:
    """Whether the transaction's effective date falls inside the month."""
    start, end = month_bounds(month)
    return start <= get_effective_date(transaction) <= end


def is_effective_date_within_current_month(
    transaction: Transaction,
    reference_date: date,
) -> bool:
    """
    Whether the effective date is on or before the end of the reference month.

    Account balances use this end-of-month cutoff instead of "today" so
    that same-month postings are never lost to timezone edges, while
    next-month recurring entries stay excluded.
    """
    return get_effective_date(transaction) <= month_end(reference_date)


def is_active(transaction: Transaction) -> bool:
    """Cancelled transactions are excluded from every calculation."""
    return not transaction.is_cancelled
