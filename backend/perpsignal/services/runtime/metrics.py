"""
Runtime metrics.

Prometheus collectors for the evaluation loop. Each RuntimeMetrics owns
its own CollectorRegistry, so several runtimes (and tests) never collide
on metric names.
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, generate_latest

# Evaluations fold a few hundred candles; most finish well under 100ms
DURATION_BUCKETS = (0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

COUNTER_NAMES = (
    "signal_evaluations_total",
    "signals_generated_total",
    "signal_evaluation_errors_total",
)


class RuntimeMetrics:
    """Counters, latency histogram and in-flight gauge for signal evaluations."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self.evaluations = Counter(
            "signal_evaluations",
            "Total number of signal evaluations",
            registry=self.registry,
        )
        self.generated = Counter(
            "signals_generated",
            "Evaluations that produced a signal",
            registry=self.registry,
        )
        self.errors = Counter(
            "signal_evaluation_errors",
            "Total number of signal evaluation errors",
            registry=self.registry,
        )
        self.duration = Histogram(
            "signal_evaluation_duration_seconds",
            "Signal evaluation latency in seconds",
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )
        self.active = Gauge(
            "signal_evaluations_active",
            "Number of signal evaluations currently in progress",
            registry=self.registry,
        )

    def _sample(self, name: str) -> float:
        return self.registry.get_sample_value(name) or 0.0

    @property
    def signal_evaluations_total(self) -> int:
        return int(self._sample("signal_evaluations_total"))

    @property
    def signals_generated_total(self) -> int:
        return int(self._sample("signals_generated_total"))

    @property
    def signal_evaluation_errors_total(self) -> int:
        return int(self._sample("signal_evaluation_errors_total"))

    @property
    def evaluation_count(self) -> int:
        """Number of evaluations observed by the latency histogram."""
        return int(self._sample("signal_evaluation_duration_seconds_count"))

    def snapshot(self) -> dict[str, int]:
        return {name: int(self._sample(name)) for name in COUNTER_NAMES}

    def export(self) -> bytes:
        """Prometheus text exposition of every collector."""
        return generate_latest(self.registry)
