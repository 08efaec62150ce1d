"""
Prometheus metrics for authorization evaluations.

Counts evaluations by resulting status, failed reads by read name, and
records evaluation latency. Pass a dedicated CollectorRegistry to keep
instances isolated (tests do this); the default is the global registry.
"""

from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, generate_latest

from .types import Status


class EvaluatorMetrics:
    """Metrics collector for the authorization evaluator."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or REGISTRY

        self.evaluations_total = Counter(
            "pullsafe_evaluations_total",
            "Completed authorization evaluations by status",
            ["status"],
            registry=self.registry,
        )

        self.read_failures_total = Counter(
            "pullsafe_read_failures_total",
            "Failed contract reads by read name",
            ["read"],
            registry=self.registry,
        )

        self.evaluation_duration = Histogram(
            "pullsafe_evaluation_duration_seconds",
            "Wall time of one evaluation including all contract reads",
            buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
            registry=self.registry,
        )

    def record_evaluation(self, status: Status, duration: float) -> None:
        self.evaluations_total.labels(status=status.value).inc()
        self.evaluation_duration.observe(duration)

    def record_read_failure(self, read_name: str) -> None:
        self.read_failures_total.labels(read=read_name).inc()

    def export(self) -> bytes:
        """Render the registry in Prometheus text exposition format."""
        return generate_latest(self.registry)
