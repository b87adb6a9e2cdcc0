"""End-to-end tests for evaluate_finance_state."""

import pytest
from datetime import date
from decimal import Decimal

from finance_engine.models import (
    ArchiveAction,
    BalanceState,
    BalanceTransition,
    CreateAction,
    EventType,
    ToastVariant,
    TransactionKind,
    TransactionStatus,
)
from finance_engine.pipeline import evaluate_finance_state

from tests.conftest import JANUARY, TODAY


INCOME = TransactionKind.INCOME
EXPENSE = TransactionKind.EXPENSE
TRANSFER = TransactionKind.TRANSFER
PLANNED = TransactionStatus.PLANNED
CONFIRMED = TransactionStatus.CONFIRMED


@pytest.fixture
def household(make_tx):
    """A healthy month where reserve money is needed to cover the rent."""
    return [
        make_tx(INCOME, "3000", date(2026, 1, 5), CONFIRMED),
        make_tx(TRANSFER, "1000", date(2026, 1, 6), CONFIRMED, to_account_id="acc-reserve"),
        make_tx(EXPENSE, "200", date(2026, 1, 8), CONFIRMED),
        make_tx(EXPENSE, "1900", date(2026, 1, 2), PLANNED, id="rent",
                due_date=date(2026, 1, 18), description="Rent"),
        make_tx(INCOME, "500", date(2026, 1, 20), PLANNED),
    ]


class TestEvaluateFinanceState:
    """Tests for the full pipeline."""

    def test_reserve_money_is_not_liquidity(self, household, accounts, settings):
        """Test that coverage risk is judged against available balances only."""
        result = evaluate_finance_state(
            household, accounts, JANUARY,
            previous_balance_state=BalanceState.NON_NEGATIVE,
            reference_date=TODAY,
            settings=settings,
        )

        assert result.snapshot.saldo_previsto_mes == Decimal("1400")
        assert result.forecast.balance_state == BalanceState.NON_NEGATIVE
        assert result.balance_transition is None

        totals = result.account_metrics.totals
        assert totals.available_realized_balance == Decimal("1800")
        assert totals.realized_balance == Decimal("2800")
        assert totals.available_projected_balance == Decimal("400")

        assert [e.id for e in result.risk_assessment.coverage_risk_expenses] == ["rent"]
        assert len(result.rules.actions) == 1
        action = result.rules.actions[0]
        assert isinstance(action, CreateAction)
        assert action.payload.event_type == EventType.UPCOMING_EXPENSE_COVERAGE_RISK.value
        assert action.payload.params == {"description": "Rent", "daysUntilDue": 3, "amount": 1900.0}

    def test_monthly_metrics_match_snapshot(self, household, accounts, settings):
        """Test that household metrics agree with the snapshot."""
        result = evaluate_finance_state(household, accounts, JANUARY, reference_date=TODAY, settings=settings)
        assert result.monthly_metrics.balance_forecast == result.snapshot.saldo_previsto_mes
        assert result.monthly_metrics.balance_realized == result.snapshot.saldo_mes

    def test_month_turning_negative(self, household, make_tx, accounts, settings):
        """Test the toast and preview when the month goes negative."""
        transactions = household + [make_tx(EXPENSE, "2000", date(2026, 1, 28), PLANNED)]
        result = evaluate_finance_state(
            transactions, accounts, JANUARY,
            previous_balance_state=BalanceState.NON_NEGATIVE,
            reference_date=TODAY,
            settings=settings,
        )

        assert result.balance_state == BalanceState.NEGATIVE
        assert result.balance_transition == BalanceTransition.POSITIVE_TO_NEGATIVE
        assert result.rules.toasts[0].variant == ToastVariant.DESTRUCTIVE
        assert result.rules.toasts[0].params == {"amount": 600.0}
        assert [a.payload.event_type for a in result.rules.actions] == [EventType.MONTH_AT_RISK_PREVIEW.value]

    def test_recovery(self, household, accounts, settings):
        """Test that recovery archives both month-at-risk families."""
        result = evaluate_finance_state(
            household, accounts, JANUARY,
            previous_balance_state=BalanceState.NEGATIVE,
            reference_date=TODAY,
            settings=settings,
        )
        assert result.balance_transition == BalanceTransition.NEGATIVE_TO_POSITIVE
        archives = [a for a in result.rules.actions if isinstance(a, ArchiveAction)]
        assert {a.event_type for a in archives} == {
            EventType.MONTH_AT_RISK.value,
            EventType.MONTH_AT_RISK_PREVIEW.value,
        }

    def test_accepts_generators(self, household, accounts, settings):
        """Test that one-shot iterables are consumed only once."""
        from_lists = evaluate_finance_state(household, accounts, JANUARY, reference_date=TODAY, settings=settings)
        from_generators = evaluate_finance_state(
            (t for t in household), (a for a in accounts), JANUARY,
            reference_date=TODAY, settings=settings,
        )
        assert from_lists == from_generators

    def test_idempotent(self, household, accounts, settings):
        """Test that two runs serialize identically."""
        first = evaluate_finance_state(household, accounts, JANUARY, reference_date=TODAY, settings=settings)
        second = evaluate_finance_state(household, accounts, JANUARY, reference_date=TODAY, settings=settings)
        assert first.model_dump_json() == second.model_dump_json()
