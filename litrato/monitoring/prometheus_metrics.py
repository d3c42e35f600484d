# litrato/monitoring/prometheus_metrics.py
"""
Prometheus metrics for the Litrato scheduling engine.

Service timings are fed by ``@BaseService.measure_operation``; scheduling
counters record how accepts end and how often conflicts are detected.
"""

from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

# Private registry: only scheduling metrics are exported
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "litrato_service_operation_duration_seconds",
    "Wall time of measured scheduling service operations",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

service_operations_total = Counter(
    "litrato_service_operations_total",
    "Measured scheduling service operations by outcome",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "litrato_errors_total",
    "Exceptions raised by measured scheduling operations",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

booking_accept_outcomes_total = Counter(
    "litrato_booking_accept_outcomes_total",
    "Outcome of booking request acceptance attempts",
    ["outcome"],  # accepted | conflict | stale
    registry=REGISTRY,
)

booking_conflicts_detected_total = Counter(
    "litrato_booking_conflicts_detected_total",
    "Conflicts detected by the conflict checker",
    ["check"],  # new_request | extension | accept
    registry=REGISTRY,
)

cascade_rejections_total = Counter(
    "litrato_cascade_rejections_total",
    "Pending requests auto-rejected because a rival was accepted",
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Thin recording API so callers never touch metric objects directly."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """Called by measure_operation once per call; error_type is the exception class name."""
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()

        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    @staticmethod
    def record_accept_outcome(outcome: str) -> None:
        booking_accept_outcomes_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_conflict(check: str) -> None:
        booking_conflicts_detected_total.labels(check=check).inc()

    @staticmethod
    def record_cascade_rejections(count: int) -> None:
        if count:
            cascade_rejections_total.inc(count)

    @staticmethod
    def get_metrics() -> bytes:
        """Render all metrics in Prometheus text format."""
        return generate_latest(REGISTRY)

    @staticmethod
    def get_content_type() -> str:
        return CONTENT_TYPE_LATEST


prometheus_metrics = PrometheusMetrics()
