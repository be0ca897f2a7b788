"""Alert condition evaluation.

Pure functions: no I/O and no state.
"""

from decimal import Decimal
from typing import Optional, Union

Number = Union[Decimal, int, float]


def is_satisfied(
    condition_type: str,
    threshold: Number,
    current_value: Number,
    pct_change_24h: Optional[Number] = None,
) -> bool:
    """Check whether an alert condition holds for a sample.

    Args:
        condition_type: One of ``price_above``, ``price_below``,
            ``percentage_change_up`` or ``percentage_change_down``.
        threshold: Price for the price conditions, percentage magnitude
            for the percentage conditions.
        current_value: Current price.
        pct_change_24h: 24h change in percent, if the provider sent one.

    Returns:
        True if the condition is met. Percentage conditions without a
        24h change and unknown condition types are never met.
    """
    if condition_type == "price_above":
        return current_value >= threshold
    elif condition_type == "price_below":
        return current_value <= threshold
    elif condition_type == "percentage_change_up":
        return pct_change_24h is not None and pct_change_24h >= threshold
    elif condition_type == "percentage_change_down":
        return pct_change_24h is not None and pct_change_24h <= -threshold

    return False
