"""Tests for alert message rendering."""

from decimal import Decimal

import pytest

from coinwatch.engine.cooldown import record_trigger
from coinwatch.formatting import (
    describe_condition,
    format_percentage,
    format_price,
    format_threshold,
    render_alert_message,
)
from coinwatch.models import MetricSample

from conftest import T0, make_subscription


class TestFormatPrice:
    @pytest.mark.parametrize(
        "price, expected",
        [
            ("50000", "$50,000.00"),
            ("1", "$1.00"),
            ("1234.567", "$1,234.57"),
            ("0.5", "$0.5000"),
            ("0.01", "$0.0100"),
            ("0.00001234", "$0.00001234"),
        ],
    )
    def test_precision_by_magnitude(self, price, expected):
        assert format_price(Decimal(price)) == expected


class TestFormatPercentage:
    def test_positive_and_negative(self):
        assert format_percentage(Decimal("6")) == "+6.00%"
        assert format_percentage(Decimal("-3.214")) == "-3.21%"
        assert format_percentage(Decimal("0")) == "+0.00%"


class TestFormatThreshold:
    @pytest.mark.parametrize(
        "value, expected",
        [("50000", "50,000"), ("50000.00000000", "50,000"), ("2.50", "2.5"), ("0.0001", "0.0001")],
    )
    def test_trailing_zeros_removed(self, value, expected):
        assert format_threshold(Decimal(value)) == expected


class TestDescribeCondition:
    @pytest.mark.parametrize(
        "condition_type, expected",
        [
            ("price_above", "price goes above $50,000"),
            ("price_below", "price drops below $50,000"),
            ("percentage_change_up", "price increases by 50,000% in 24h"),
            ("percentage_change_down", "price decreases by 50,000% in 24h"),
        ],
    )
    def test_each_type(self, condition_type, expected):
        sub = make_subscription(condition_type=condition_type, threshold="50000")
        assert describe_condition(sub) == expected


class TestRenderAlertMessage:
    def test_one_shot_message(self):
        sub = make_subscription(
            "bitcoin", "price_above", "100000",
            resource_symbol="BTC", resource_name="Bitcoin", notes="take profit",
        )
        triggered = record_trigger(sub, Decimal("100500"), T0)
        message = render_alert_message(
            triggered, MetricSample(value=Decimal("100500"), pct_change_24h=Decimal("4.2"))
        )

        assert "BTC (Bitcoin)" in message
        assert "Current Price: $100,500.00" in message
        assert "24h Change: +4.20%" in message
        assert "Price reached above $100,000" in message
        assert "Notes: take profit" in message
        assert "Triggered at: 2026-01-01 12:00:00 UTC" in message
        assert "one-time alert" in message

    def test_repeat_message_without_change(self):
        sub = make_subscription("eth", "percentage_change_down", "10", repeat=True)
        triggered = record_trigger(sub, Decimal("2000"), T0)
        message = render_alert_message(triggered, MetricSample(value=Decimal("2000")))

        assert "24h Change" not in message
        assert "Price decreased by 10% in 24h" in message
        assert "will repeat" in message
