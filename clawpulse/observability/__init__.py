"""Observability layer - logging and metrics."""

from clawpulse.observability.logging import setup_logging
from clawpulse.observability.metrics import MetricsCollector, get_metrics

__all__ = ["setup_logging", "MetricsCollector", "get_metrics"]
