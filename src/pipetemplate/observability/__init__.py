"""
Observability — Logging and metrics for pipeline runs.

Provides:
- Structured logging with run ID
- Metrics collection (counters, gauges, histograms)
"""

from pipetemplate.observability.logging import (
    set_run_id,
    get_run_id,
    configure_logging,
    get_logger,
    RunContext,
    JSONFormatter,
    ReadableFormatter,
)
from pipetemplate.observability.metrics import (
    Counter,
    Gauge,
    Histogram,
    MetricsRegistry,
    get_metrics,
    reset_metrics,
)

__all__ = [
    # Logging
    "set_run_id",
    "get_run_id",
    "configure_logging",
    "get_logger",
    "RunContext",
    "JSONFormatter",
    "ReadableFormatter",
    # Metrics
    "Counter",
    "Gauge",
    "Histogram",
    "MetricsRegistry",
    "get_metrics",
    "reset_metrics",
]
