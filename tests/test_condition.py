"""Tests for alert condition evaluation."""

from decimal import Decimal

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from coinwatch.engine.condition import is_satisfied


class TestConditionTable:
    """Boundary cases for each condition type."""

    @pytest.mark.parametrize(
        "condition_type, threshold, value, change, expected",
        [
            ("price_above", "50000", "50000", None, True),
            ("price_above", "50000", "49999.99", None, False),
            ("price_above", "50000", "50000.01", None, True),
            ("price_below", "10", "10", None, True),
            ("price_below", "10", "12", None, False),
            ("price_below", "10", "9.5", None, True),
            ("percentage_change_up", "5", "100", "5", True),
            ("percentage_change_up", "5", "100", "4.99", False),
            ("percentage_change_up", "5", "100", None, False),
            ("percentage_change_down", "10", "100", "-10", True),
            ("percentage_change_down", "10", "100", "-9.99", False),
            ("percentage_change_down", "10", "100", "-15", True),
            ("percentage_change_down", "10", "100", None, False),
        ],
    )
    def test_condition(self, condition_type, threshold, value, change, expected):
        result = is_satisfied(
            condition_type,
            Decimal(threshold),
            Decimal(value),
            None if change is None else Decimal(change),
        )
        assert result is expected

    def test_unknown_condition_is_not_satisfied(self):
        assert is_satisfied("volume_spike", Decimal("1"), Decimal("100"), Decimal("50")) is False

    def test_mixed_float_and_decimal(self):
        assert is_satisfied("price_above", Decimal("100"), 105.0, 6.0) is True
        assert is_satisfied("percentage_change_up", Decimal("5"), 105.0, 6.0) is True


class TestConditionProperties:
    """
    *For any* threshold and sample, evaluation agrees with the plain
    comparison and never raises.
    """

    prices = st.decimals(min_value=0, max_value=10**7, places=2, allow_nan=False, allow_infinity=False)
    changes = st.one_of(
        st.none(),
        st.decimals(min_value=-100, max_value=1000, places=2, allow_nan=False, allow_infinity=False),
    )

    @given(threshold=prices, value=prices)
    @settings(max_examples=100)
    def test_above_and_below(self, threshold: Decimal, value: Decimal):
        assert is_satisfied("price_above", threshold, value) == (value >= threshold)
        assert is_satisfied("price_below", threshold, value) == (value <= threshold)

    @given(threshold=prices, value=prices, change=changes)
    @settings(max_examples=100)
    def test_percentage_conditions(self, threshold: Decimal, value: Decimal, change):
        up = is_satisfied("percentage_change_up", threshold, value, change)
        down = is_satisfied("percentage_change_down", threshold, value, change)

        if change is None:
            assert up is False and down is False
        else:
            assert up == (change >= threshold)
            assert down == (change <= -threshold)

    @given(threshold=prices, value=prices)
    @settings(max_examples=50)
    def test_price_conditions_ignore_change(self, threshold: Decimal, value: Decimal):
        assert is_satisfied("price_above", threshold, value, None) == is_satisfied(
            "price_above", threshold, value, Decimal("-50")
        )
