"""
Prometheus metrics for the alert synchronization core.

Defines and exposes metrics for:
- Snapshot processing and projection latency
- Active / history view sizes
- Local alert surfaces raised and retracted
- Acknowledge outcomes
- Feed delivery failures
- Gateway ingestion

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from caretaker.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)


class MetricsCollector:
    """
    Prometheus metrics collector for the caretaker service.

    Usage:
        metrics = MetricsCollector()
        metrics.start_server()

        metrics.record_surface_raised("urgent")
        metrics.record_acknowledge("failed")
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        self.snapshots_processed = Counter(
            "caretaker_snapshots_processed_total",
            "Total number of alert snapshots projected",
        )

        self.projection_latency = Histogram(
            "caretaker_projection_latency_seconds",
            "Time to project and dispatch one snapshot",
            buckets=LATENCY_BUCKETS,
        )

        self.active_alerts = Gauge(
            "caretaker_active_alerts",
            "Number of unacknowledged alerts in the latest snapshot",
        )

        self.history_alerts = Gauge(
            "caretaker_history_alerts",
            "Number of alerts in the latest snapshot",
        )

        self.surfaces_raised = Counter(
            "caretaker_surfaces_raised_total",
            "Total local alert surfaces raised",
            ["category"],  # urgent, standard
        )

        self.surface_errors = Counter(
            "caretaker_surface_errors_total",
            "Total notifier failures while raising a surface",
        )

        self.surfaces_retracted = Counter(
            "caretaker_surfaces_retracted_total",
            "Total local alert surface retractions requested",
        )

        self.acknowledgements = Counter(
            "caretaker_acknowledgements_total",
            "Total acknowledge commands by outcome",
            ["status"],  # acknowledged, ignored, failed
        )

        self.feed_errors = Counter(
            "caretaker_feed_errors_total",
            "Total remote feed delivery failures",
        )

        self.alerts_ingested = Counter(
            "caretaker_alerts_ingested_total",
            "Total alerts created through the ingestion gateway",
            ["type"],  # known type token or "other"
        )

        self._server_started = False

    def start_server(self, port: int | None = None) -> None:
        """
        Start HTTP server for Prometheus scraping.

        Args:
            port: Port to listen on (defaults to settings.metrics_port)
        """
        if self._server_started:
            return

        port = port or get_settings().metrics_port
        start_http_server(port)
        self._server_started = True
        logger.info("Metrics server started on port %d", port)

    def record_snapshot(self, active: int, history: int, latency: float) -> None:
        """
        Record one processed snapshot.

        Args:
            active: Size of the active view
            history: Size of the history view
            latency: Projection + dispatch latency in seconds
        """
        self.snapshots_processed.inc()
        self.active_alerts.set(active)
        self.history_alerts.set(history)
        if latency > 0:
            self.projection_latency.observe(latency)

    def record_surface_raised(self, category: str) -> None:
        self.surfaces_raised.labels(category=category).inc()

    def record_surface_error(self) -> None:
        self.surface_errors.inc()

    def record_surface_retracted(self) -> None:
        self.surfaces_retracted.inc()

    def record_acknowledge(self, status: str) -> None:
        self.acknowledgements.labels(status=status).inc()

    def record_feed_error(self) -> None:
        self.feed_errors.inc()

    def record_alert_ingested(self, alert_type: str) -> None:
        self.alerts_ingested.labels(type=alert_type).inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
