"""
Tests for Finance Engine models

Test strategy:
1. Input records enforce their contract at construction time
2. Derived models are frozen
3. Rule actions form a closed, discriminated union
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from pydantic import TypeAdapter, ValidationError

from finance_engine.models import (
    Account,
    CreateAction,
    FutureEngineInput,
    NotificationPayload,
    NotificationRuleAction,
    NotificationRulesOutput,
    NotificationSeverity,
    SkipAction,
    StoredNotificationState,
    ToastAction,
    ToastPayload,
    Transaction,
    TransactionFilter,
    TransactionKind,
    TransactionStatus,
)


class TestTransactionModel:
    """Tests for the Transaction input record."""

    def test_accepts_iso_strings(self):
        """Test that the persistence layer's ISO dates and numeric strings are parsed."""
        tx = Transaction(
            id="t1",
            kind="EXPENSE",
            amount="125.50",
            date="2026-01-10",
            due_date="2026-01-20",
            status="planned",
            account_id="acc",
        )
        assert tx.kind == TransactionKind.EXPENSE
        assert tx.amount == Decimal("125.50")
        assert tx.date == date(2026, 1, 10)
        assert tx.due_date == date(2026, 1, 20)
        assert tx.is_planned

    def test_rejects_non_positive_amount(self):
        """Test that direction comes from kind, never from the sign."""
        with pytest.raises(ValidationError):
            Transaction(id="t1", kind="EXPENSE", amount="-10", date="2026-01-10", account_id="acc")
        with pytest.raises(ValidationError):
            Transaction(id="t1", kind="EXPENSE", amount="0", date="2026-01-10", account_id="acc")

    def test_rejects_unknown_status(self):
        """Test that status is a closed set."""
        with pytest.raises(ValidationError):
            Transaction(id="t1", kind="INCOME", amount="1", date="2026-01-10", account_id="acc", status="paid")

    def test_cancelled_by_status_or_timestamp(self):
        """Test both soft-cancellation forms."""
        by_status = Transaction(
            id="t1", kind="INCOME", amount="1", date="2026-01-10",
            account_id="acc", status=TransactionStatus.CANCELLED,
        )
        by_timestamp = Transaction(
            id="t2", kind="INCOME", amount="1", date="2026-01-10",
            account_id="acc", status=TransactionStatus.CONFIRMED,
            cancelled_at=datetime(2026, 1, 11, 9, 0),
        )
        assert by_status.is_cancelled
        assert by_timestamp.is_cancelled

    def test_transaction_is_frozen(self):
        """Test that engine stages cannot mutate their inputs."""
        tx = Transaction(id="t1", kind="INCOME", amount="1", date="2026-01-10", account_id="acc")
        with pytest.raises(ValidationError):
            tx.amount = Decimal("2")

    def test_strips_whitespace(self):
        """Test that whitespace is stripped from identifiers."""
        tx = Transaction(id="  t1  ", kind="INCOME", amount="1", date="2026-01-10", account_id=" acc ")
        assert tx.id == "t1"
        assert tx.account_id == "acc"


class TestAccountModel:

    def test_defaults(self):
        """Test that accounts are available and active unless stated."""
        account = Account(id="acc")
        assert not account.is_reserve
        assert account.is_active


class TestFutureEngineInput:

    def test_rejects_impossible_month_length(self):
        """Test that days_in_month is bounded."""
        with pytest.raises(ValidationError):
            FutureEngineInput(current_balance=0, days_elapsed=1, days_in_month=32)

    def test_negative_balance_allowed(self):
        """Test that an overdrawn balance is a valid input."""
        engine_input = FutureEngineInput(current_balance=-50, days_elapsed=1, days_in_month=30)
        assert engine_input.current_balance == -50


class TestNotificationModels:
    """Tests for notification payloads and rule actions."""

    def _payload(self, **overrides):
        data = dict(
            event_type="PAYMENT_DELAYED",
            reference_id="overdue_payments",
            message_key="notifications.messages.payment_delayed_single",
            params={"count": 1, "transactionIds": ["t1"], "amount": 10.5},
            severity=NotificationSeverity.WARNING,
        )
        data.update(overrides)
        return NotificationPayload(**data)

    def test_payload_requires_message_key(self):
        """Test the message contract: a key is mandatory."""
        with pytest.raises(ValidationError):
            self._payload(message_key="")

    def test_params_keep_primitive_types(self):
        """Test that params survive validation unchanged."""
        payload = self._payload()
        assert payload.params["count"] == 1
        assert isinstance(payload.params["count"], int)
        assert payload.params["transactionIds"] == ("t1",)
        assert payload.params["amount"] == 10.5

    def test_params_are_read_only(self):
        """Test that an emitted payload's params cannot be changed in place."""
        payload = self._payload()
        with pytest.raises(TypeError):
            payload.params["count"] = 2
        with pytest.raises(TypeError):
            ToastPayload(title_key="a.title", description_key="a.description").params["amount"] = 1.0

    def test_params_dump_to_plain_dict(self):
        """Test that serialized params are ordinary JSON objects."""
        payload = self._payload()
        dumped = payload.model_dump()
        assert type(dumped["params"]) is dict
        assert dumped["params"]["count"] == 1
        assert '"transactionIds":["t1"]' in payload.model_dump_json()

    def test_action_union_discriminates_on_type(self):
        """Test that serialized actions parse back into the right variant."""
        adapter = TypeAdapter(NotificationRuleAction)
        action = adapter.validate_python({"type": "SKIP", "reason": "dismissed"})
        assert isinstance(action, SkipAction)
        assert action.reason == "dismissed"

        created = adapter.validate_python(CreateAction(payload=self._payload()).model_dump())
        assert isinstance(created, CreateAction)

    def test_action_union_rejects_unknown_type(self):
        """Test that the union is closed."""
        with pytest.raises(ValidationError):
            TypeAdapter(NotificationRuleAction).validate_python({"type": "DELETE"})

    def test_all_actions_puts_toasts_first(self):
        """Test that toasts come before notification actions."""
        toast = ToastPayload(title_key="a.title", description_key="a.description")
        output = NotificationRulesOutput(
            actions=(CreateAction(payload=self._payload()),),
            toasts=(toast,),
        )
        actions = output.all_actions()
        assert isinstance(actions[0], ToastAction)
        assert isinstance(actions[1], CreateAction)

    def test_stored_notification_open_until_dismissed(self):
        """Test that dismissal closes a stored notification."""
        open_state = StoredNotificationState(id="n1", severity="warning")
        dismissed = StoredNotificationState(id="n2", severity="warning", dismissed_at=datetime(2026, 1, 2))
        assert open_state.is_open
        assert not dismissed.is_open


class TestTransactionFilter:

    def test_empty_filter(self):
        """Test the default filter."""
        assert TransactionFilter().is_empty
        assert not TransactionFilter(status="planned").is_empty

    def test_rejects_unknown_view(self):
        """Test that views are a closed set."""
        with pytest.raises(ValidationError):
            TransactionFilter(view="everything")
