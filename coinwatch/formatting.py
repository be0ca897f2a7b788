"""Plain-text rendering of alert notifications."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from coinwatch.models import MetricSample, Subscription


def format_price(price: Decimal, currency: str = "$") -> str:
    """Format a price with precision that depends on its magnitude.

    Args:
        price: Price to format.
        currency: Currency prefix.

    Returns:
        ``$1,234.56`` for prices of at least 1, four decimals down to
        0.01 and eight decimals below that.
    """
    if price >= 1:
        return f"{currency}{price:,.2f}"
    if price >= Decimal("0.01"):
        return f"{currency}{price:.4f}"
    return f"{currency}{price:.8f}"


def format_percentage(percentage: Decimal) -> str:
    """Format a percentage change with an explicit sign."""
    sign = "+" if percentage >= 0 else "-"
    return f"{sign}{abs(percentage):.2f}%"


def format_threshold(threshold: Decimal) -> str:
    """Format a threshold without trailing zeros (``50,000``, ``2.5``)."""
    normalized = threshold.normalize()
    if normalized == normalized.to_integral_value():
        normalized = normalized.quantize(Decimal(1))
    return f"{normalized:,f}"


def describe_condition(subscription: Subscription) -> str:
    """Short description of an alert's condition for listings."""
    threshold = format_threshold(subscription.threshold)
    descriptions = {
        "price_above": f"price goes above ${threshold}",
        "price_below": f"price drops below ${threshold}",
        "percentage_change_up": f"price increases by {threshold}% in 24h",
        "percentage_change_down": f"price decreases by {threshold}% in 24h",
    }
    return descriptions.get(subscription.condition_type, subscription.condition_type)


def _trigger_sentence(subscription: Subscription) -> str:
    threshold = format_threshold(subscription.threshold)
    sentences = {
        "price_above": f"Price reached above ${threshold}",
        "price_below": f"Price dropped below ${threshold}",
        "percentage_change_up": f"Price increased by {threshold}% in 24h",
        "percentage_change_down": f"Price decreased by {threshold}% in 24h",
    }
    return sentences.get(subscription.condition_type, subscription.condition_type)


def render_alert_message(
    subscription: Subscription,
    sample: MetricSample,
    triggered_at: Optional[datetime] = None,
) -> str:
    """Build the notification text for a triggered alert.

    Args:
        subscription: The alert, already carrying its trigger fields.
        sample: The sample that satisfied the condition.
        triggered_at: Trigger time; defaults to the alert's ``triggered_at``.

    Returns:
        Multi-line plain-text message.
    """
    when = triggered_at or subscription.triggered_at

    lines = [
        "Crypto Alert Triggered!",
        "",
        f"{subscription.resource_symbol} ({subscription.resource_name})",
        f"Current Price: {format_price(sample.value)}",
    ]
    if sample.pct_change_24h is not None:
        lines.append(f"24h Change: {format_percentage(sample.pct_change_24h)}")

    lines += ["", "Alert Condition:", _trigger_sentence(subscription)]

    if subscription.notes:
        lines += ["", f"Notes: {subscription.notes}"]

    lines.append("")
    if when is not None:
        lines.append(f"Triggered at: {when:%Y-%m-%d %H:%M:%S %Z}".rstrip())
    if subscription.repeat:
        lines.append("This alert will repeat if conditions are met again.")
    else:
        lines.append("This was a one-time alert and has been deactivated.")

    return "\n".join(lines)
