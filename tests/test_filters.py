"""Tests for notification CTA filters."""

import pytest

from finance_engine.filters import (
    build_transaction_filters_from_notification,
    build_transaction_url,
    parse_cta_target,
)
from finance_engine.models import EventType, NotificationContext, TransactionFilter


class TestParseCtaTarget:
    """Tests for the CTA target parser."""

    def test_view_only(self):
        """Test a target carrying only a view."""
        assert parse_cta_target("/transactions?view=overdue") == TransactionFilter(view="overdue")

    def test_all_parameters(self):
        """Test that every recognized parameter is parsed."""
        result = parse_cta_target(
            "/transactions?view=month_pending&status=planned&category=c1&subcategory=s1&month=2026-01"
        )
        assert result == TransactionFilter(
            view="month_pending",
            status="planned",
            category_id="c1",
            subcategory_id="s1",
            month="2026-01",
        )

    def test_filter_prefixed_aliases(self):
        """Test the legacy filter_* parameter names."""
        result = parse_cta_target("/transactions?filter_category=c1&filter_subcategory=s1")
        assert result.category_id == "c1"
        assert result.subcategory_id == "s1"

    def test_plain_name_wins_over_alias(self):
        """Test that category is preferred over filter_category."""
        result = parse_cta_target("/transactions?filter_category=old&category=new")
        assert result.category_id == "new"

    def test_unknown_values_are_ignored(self):
        """Test that an unknown view does not invalidate the other parameters."""
        result = parse_cta_target("/transactions?view=everything&status=planned")
        assert result == TransactionFilter(status="planned")

    @pytest.mark.parametrize("target", [None, "", 42, "/transactions", "/transactions?highlight=t1", "http://[::1"])
    def test_unusable_targets_give_empty_filter(self, target):
        """Test that malformed input never raises."""
        assert parse_cta_target(target).is_empty


class TestFiltersFromNotification:
    """Tests for the event-type fallback table."""

    def test_cta_target_wins(self):
        """Test that a stored target takes precedence over the event table."""
        context = NotificationContext(
            event_type=EventType.PAYMENT_DELAYED.value,
            cta_target="/transactions?view=month_pending&month=2026-02",
        )
        result = build_transaction_filters_from_notification(context)
        assert result == TransactionFilter(view="month_pending", month="2026-02")

    def test_payment_delayed(self):
        """Test the overdue view for delayed payments."""
        context = NotificationContext(event_type=EventType.PAYMENT_DELAYED.value)
        assert build_transaction_filters_from_notification(context) == TransactionFilter(
            view="overdue", status="planned"
        )

    def test_highlight_target_gives_empty_filter(self):
        """Test that a stored target is used even when it carries no filter parameters."""
        context = NotificationContext(
            event_type=EventType.UPCOMING_EXPENSE_COVERAGE_RISK.value,
            reference_id="t1",
            cta_target="/transactions?highlight=t1",
        )
        assert build_transaction_filters_from_notification(context) == TransactionFilter()

    @pytest.mark.parametrize("event_type", [EventType.MONTH_AT_RISK, EventType.MONTH_AT_RISK_PREVIEW])
    def test_month_at_risk(self, event_type):
        """Test that both month-at-risk families open the month's pending view."""
        context = NotificationContext(event_type=event_type.value, reference_id="2026-01")
        assert build_transaction_filters_from_notification(context) == TransactionFilter(
            view="month_pending", status="planned", month="2026-01"
        )

    def test_recurring_late_payment_uses_metadata(self):
        """Test that category ids come from the notification metadata."""
        context = NotificationContext(
            event_type=EventType.RECURRING_LATE_PAYMENT.value,
            metadata={"categoryId": "c1", "subcategoryId": "s1"},
        )
        assert build_transaction_filters_from_notification(context) == TransactionFilter(
            view="late_pattern", category_id="c1", subcategory_id="s1"
        )

    def test_missing_recurring_with_string_metadata(self):
        """Test that JSON-encoded metadata is accepted."""
        context = NotificationContext(
            event_type=EventType.MISSING_RECURRING_EXPENSE.value,
            metadata='{"categoryId": "c9"}',
        )
        assert build_transaction_filters_from_notification(context) == TransactionFilter(
            status="planned", category_id="c9"
        )

    @pytest.mark.parametrize("metadata", [None, [1, 2], 42, "not json"])
    def test_unusable_metadata_is_treated_as_empty(self, metadata):
        """Test that missing or malformed metadata never raises."""
        context = NotificationContext(
            event_type=EventType.RECURRING_LATE_PAYMENT.value,
            metadata=metadata,
        )
        assert context.metadata == {}
        assert build_transaction_filters_from_notification(context) == TransactionFilter(view="late_pattern")

    def test_unknown_event_type(self):
        """Test that an unmapped event type gives an empty filter."""
        context = NotificationContext(event_type="SOMETHING_ELSE")
        assert build_transaction_filters_from_notification(context).is_empty


class TestBuildTransactionUrl:

    def test_empty_filter(self):
        """Test the default filter."""
        assert build_transaction_url(TransactionFilter()) == "/transactions"

    def test_uses_query_parameter_names(self):
        """Test that filter fields map back to query parameter names."""
        url = build_transaction_url(TransactionFilter(view="overdue", status="planned", category_id="c1"))
        assert url == "/transactions?view=overdue&status=planned&category=c1"

    def test_parses_back(self):
        """Test that a built URL parses into the same filter."""
        original = TransactionFilter(view="late_pattern", category_id="c1", subcategory_id="s 1")
        assert parse_cta_target(build_transaction_url(original)) == original
