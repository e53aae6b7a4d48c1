"""Tests for the assistant configuration struct."""

import pytest

from config import AssistantConfig, DEFAULT_CATEGORY_KEYWORDS


class TestFromMapping:
    def test_defaults(self):
        c = AssistantConfig.from_mapping({})
        assert c.default_service == "AEPS"
        assert c.match_order == "first"
        assert list(c.category_keywords) == list(DEFAULT_CATEGORY_KEYWORDS)

    def test_overrides(self):
        c = AssistantConfig.from_mapping(
            {"DEFAULT_SERVICE": "PAN", "KB_MATCH_ORDER": "longest", "CATEGORY_KEYWORDS": {"GST": ("gstin",)}}
        )
        assert c.default_service == "PAN"
        assert c.match_order == "longest"
        assert c.category_keywords == {"GST": ("gstin",)}

    def test_unknown_match_order_raises(self):
        with pytest.raises(ValueError, match="match_order"):
            AssistantConfig.from_mapping({"KB_MATCH_ORDER": "random"})


def test_category_order_is_fixed():
    assert list(DEFAULT_CATEGORY_KEYWORDS) == ["PAN", "RECHARGE", "AEPS", "PAYOUT", "KYC", "IRCTC"]


def test_app_wires_config(app):
    controller = app.extensions["triage"]
    assert controller.config.default_service == "AEPS"
    assert controller.matcher.match_order == "first"
