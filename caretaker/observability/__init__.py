"""Observability layer - logging and metrics."""

from caretaker.observability.logging import setup_logging
from caretaker.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
