"""Stateless alert classification.

Maps an alert type token to an urgency category and a display label.
Every ``AlertType`` member must appear in ``ALERT_TYPE_CATEGORIES``; tokens
outside the enum are standard alerts labelled with the same splitting rule.
"""

from dataclasses import dataclass

from caretaker.alerts.schemas import AlertCategory, AlertType

ALERT_TYPE_CATEGORIES: dict[AlertType, AlertCategory] = {
    AlertType.FALL_DETECTED: AlertCategory.URGENT,
    AlertType.PROLONGED_INACTIVITY: AlertCategory.URGENT,
    AlertType.SHORT_HUM: AlertCategory.STANDARD,
    AlertType.LONG_HUM: AlertCategory.STANDARD,
    AlertType.GESTURE_LEFT: AlertCategory.STANDARD,
    AlertType.GESTURE_RIGHT: AlertCategory.STANDARD,
}

CATEGORY_MARKERS: dict[AlertCategory, str] = {
    AlertCategory.URGENT: "⚠️🆘",
    AlertCategory.STANDARD: "🚨",
}

WORD_SEPARATOR = "_"
BLANK_TYPE_NAME = "Emergency Alert"


@dataclass(frozen=True)
class AlertClassification:
    """Display and urgency metadata for an alert type."""

    category: AlertCategory
    label: str

    @property
    def is_urgent(self) -> bool:
        return self.category is AlertCategory.URGENT


def category_for(alert_type: str) -> AlertCategory:
    """Return the urgency category for a type token."""
    known = AlertType.parse(alert_type)
    if known is None:
        return AlertCategory.STANDARD
    return ALERT_TYPE_CATEGORIES[known]


def format_type_name(alert_type: str) -> str:
    """Turn ``FALL_DETECTED`` into ``Fall Detected``.

    Empty segments (leading, trailing or doubled separators) are skipped.
    """
    words = [w.capitalize() for w in alert_type.strip().split(WORD_SEPARATOR) if w]
    return " ".join(words) or BLANK_TYPE_NAME


def classify(alert_type: str) -> AlertClassification:
    """Classify an alert type token.

    Total and deterministic: unknown tokens are standard alerts.

    Args:
        alert_type: Raw type token from the alert record.

    Returns:
        AlertClassification with category and marker-prefixed label.
    """
    category = category_for(alert_type)
    label = f"{CATEGORY_MARKERS[category]} {format_type_name(alert_type)}"
    return AlertClassification(category=category, label=label)
