"""Tests for notification metadata parsing and sanitization."""

import json

import pytest

from finance_engine.validation import (
    merge_notification_params,
    safe_parse_json_object,
    sanitize_notification_metadata,
    sanitize_notification_params,
    sanitize_risk_event_metadata,
)


class TestSafeParse:
    """Tests for permissive JSON object parsing."""

    def test_mapping_is_copied(self):
        """Test that a mapping is returned as a new dict."""
        source = {"a": 1}
        result = safe_parse_json_object(source)
        assert result == {"a": 1}
        assert result is not source

    def test_json_string(self):
        """Test a plain JSON object string."""
        assert safe_parse_json_object('{"count": 2}') == {"count": 2}

    def test_double_encoded_string(self):
        """Test a JSON object stored as a JSON string."""
        encoded = json.dumps(json.dumps({"count": 2}))
        assert safe_parse_json_object(encoded) == {"count": 2}

    @pytest.mark.parametrize("data", [None, "", "not json", "[1, 2]", 42, '"just text"'])
    def test_unusable_input_gives_empty_dict(self, data):
        """Test that anything but a JSON object gives an empty dict."""
        assert safe_parse_json_object(data) == {}


class TestMergeParams:
    """Tests for merging legacy metadata into params."""

    def test_params_override_metadata(self):
        """Test that params take precedence over metadata."""
        merged = merge_notification_params({"count": 1, "month": "2026-01"}, {"count": 3})
        assert merged == {"count": 3, "month": "2026-01"}

    def test_legacy_aliases(self):
        """Test that older key names are backfilled."""
        merged = merge_notification_params('{"description": "Rent", "days": 4}', None)
        assert merged["subcategoryName"] == "Rent"
        assert merged["daysOverdue"] == 4
        assert merged["categoryName"] == ""

    def test_aliases_do_not_overwrite(self):
        """Test that aliases only fill missing keys."""
        merged = merge_notification_params(
            None,
            {"description": "Rent", "subcategoryName": "Housing", "categoryName": "Home"},
        )
        assert merged["subcategoryName"] == "Housing"
        assert merged["categoryName"] == "Home"

    def test_both_empty(self):
        """Test that two empty bags merge into an empty dict."""
        assert merge_notification_params(None, "") == {}


class TestSanitizers:
    """Tests for allowlist sanitization."""

    def test_notification_metadata_allowlist(self, settings):
        """Test that only allowed primitive keys survive."""
        data = {
            "template_key": "month_at_risk",
            "severity": "warning",
            "entity_id": 7,
            "password": "secret",
            "month": None,
            "nested": {"a": 1},
        }
        assert sanitize_notification_metadata(data, settings) == {
            "template_key": "month_at_risk",
            "severity": "warning",
            "entity_id": 7,
        }

    def test_params_allowlist_drops_lists(self, settings):
        """Test that list values are dropped from params."""
        data = {"category_name": "Home", "account_name": ["a"], "title_key": "t"}
        assert sanitize_notification_params(data, settings) == {"category_name": "Home", "title_key": "t"}

    def test_risk_event_metadata_keeps_booleans_and_numbers(self, settings):
        """Test that booleans and numbers are primitives."""
        data = {"rule_key": "coverage", "scope": True, "month": 1.5, "amount": 10}
        assert sanitize_risk_event_metadata(data, settings) == {"rule_key": "coverage", "scope": True, "month": 1.5}

    def test_oversized_result_is_dropped(self, settings):
        """Test that metadata over the size limit is discarded entirely."""
        small = settings.model_copy(update={"metadata_max_bytes": 64})
        assert sanitize_risk_event_metadata({"rule_key": "x" * 100}, small) == {}

    @pytest.mark.parametrize("data", [None, "string", ["rule_key"]])
    def test_non_mapping_input(self, data, settings):
        """Test that non-mapping input gives an empty dict."""
        assert sanitize_risk_event_metadata(data, settings) == {}
