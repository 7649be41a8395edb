"""
Prometheus metrics for the action-processing pipeline.

Defines and exposes metrics for:
- Agent actions by outcome
- Story validation verdicts
- Source fetches
- Credibility oracle latency

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from clawpulse.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


class MetricsCollector:
    """
    Prometheus metrics collector for ClawPulse.

    Usage:
        metrics = get_metrics()
        metrics.record_action("break", "confirm")
        metrics.record_validation("rejected")
    """

    def __init__(self):
        self.actions_processed = Counter(
            "clawpulse_actions_processed_total",
            "Total agent actions processed",
            ["action", "outcome"],  # outcome: applied, dropped, confirm, reject
        )

        self.validations = Counter(
            "clawpulse_validations_total",
            "Story validation verdicts",
            ["outcome"],  # accepted, rejected, retryable
        )

        self.source_fetches = Counter(
            "clawpulse_source_fetches_total",
            "Source URL fetches by outcome",
            ["outcome"],  # ok, empty, error
        )

        self.oracle_latency = Histogram(
            "clawpulse_oracle_latency_seconds",
            "Credibility oracle call latency",
            buckets=LATENCY_BUCKETS,
        )

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    def record_action(self, action: str, outcome: str) -> None:
        self.actions_processed.labels(action=action, outcome=outcome).inc()

    def record_validation(self, outcome: str) -> None:
        self.validations.labels(outcome=outcome).inc()

    def record_fetch(self, outcome: str) -> None:
        self.source_fetches.labels(outcome=outcome).inc()

    def record_oracle_latency(self, latency: float) -> None:
        self.oracle_latency.observe(latency)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
