"""
Metrics — In-process counters for template processing and resource creation.
"""

from dataclasses import dataclass, field
from threading import Lock
from typing import Any


class Counter:
    """Monotonically increasing counter."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()

    def inc(self, amount: float = 1.0) -> None:
        """Increment counter."""
        if amount < 0:
            raise ValueError("Counter can only increase")
        with self._lock:
            self._value += amount

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0.0


class Gauge:
    """Number of things currently in flight."""

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._value = 0.0
        self._lock = Lock()

    def inc(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value += amount

    def dec(self, amount: float = 1.0) -> None:
        with self._lock:
            self._value -= amount

    @property
    def value(self) -> float:
        return self._value

    def reset(self) -> None:
        with self._lock:
            self._value = 0.0


class Histogram:
    """
    Running summary of observed values.

    Keeps count and sum; enough for averages.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.description = description
        self._count = 0
        self._sum = 0.0
        self._lock = Lock()

    def observe(self, value: float) -> None:
        with self._lock:
            self._count += 1
            self._sum += value

    @property
    def count(self) -> int:
        return self._count

    @property
    def sum(self) -> float:
        return self._sum

    @property
    def avg(self) -> float:
        if self._count == 0:
            return 0.0
        return self._sum / self._count

    def reset(self) -> None:
        with self._lock:
            self._count = 0
            self._sum = 0.0

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self._count,
            "sum": self._sum,
            "avg": self.avg,
        }


@dataclass
class MetricsRegistry:
    """Registry for all pipeline metrics."""
    # Processing
    templates_processed: Counter = field(
        default_factory=lambda: Counter("templates_processed", "Templates expanded and mapped")
    )
    process_failures: Counter = field(
        default_factory=lambda: Counter("process_failures", "Runs that failed processing")
    )
    process_duration_seconds: Histogram = field(
        default_factory=lambda: Histogram("process_duration_seconds", "Fetch-to-map duration")
    )

    # Creation
    resources_created: Counter = field(
        default_factory=lambda: Counter("resources_created", "Resources created")
    )
    resource_create_failures: Counter = field(
        default_factory=lambda: Counter("resource_create_failures", "Failed creation calls")
    )
    create_latency_seconds: Histogram = field(
        default_factory=lambda: Histogram("create_latency_seconds", "Single creation call latency")
    )

    # Instantiation
    instantiations_total: Counter = field(
        default_factory=lambda: Counter("instantiations_total", "Instantiate calls")
    )
    instantiations_failed: Counter = field(
        default_factory=lambda: Counter("instantiations_failed", "Instantiate calls that failed")
    )
    active_instantiations: Gauge = field(
        default_factory=lambda: Gauge("active_instantiations", "Instantiations in progress")
    )

    def to_dict(self) -> dict[str, Any]:
        """Export all metrics as dict."""
        return {
            "process": {
                "templates_processed": self.templates_processed.value,
                "failures": self.process_failures.value,
                "duration": self.process_duration_seconds.to_dict(),
            },
            "create": {
                "created": self.resources_created.value,
                "failures": self.resource_create_failures.value,
                "latency": self.create_latency_seconds.to_dict(),
            },
            "instantiate": {
                "total": self.instantiations_total.value,
                "failed": self.instantiations_failed.value,
                "active": self.active_instantiations.value,
            },
        }

    def reset(self) -> None:
        """Reset all metrics (for testing)."""
        self.templates_processed.reset()
        self.process_failures.reset()
        self.process_duration_seconds.reset()
        self.resources_created.reset()
        self.resource_create_failures.reset()
        self.create_latency_seconds.reset()
        self.instantiations_total.reset()
        self.instantiations_failed.reset()
        self.active_instantiations.reset()


_metrics = MetricsRegistry()


def get_metrics() -> MetricsRegistry:
    """Get global metrics registry."""
    return _metrics


def reset_metrics() -> None:
    """Reset all metrics (for testing)."""
    _metrics.reset()
