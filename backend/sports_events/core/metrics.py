"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_attempts = Counter(
    "booking_attempts_total",
    "Total booking attempts",
    ["status"],  # success, conflict, not_found, error
)

booking_latency = Histogram(
    "booking_latency_seconds",
    "Booking creation latency",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
)

booking_status_changes = Counter(
    "booking_status_changes_total",
    "Accepted booking and payment status changes",
    ["kind"],  # booking, payment, cancel
)

# Cache metrics
cache_operations = Counter(
    "cache_operations_total",
    "Read-through cache lookups",
    ["partition", "result"],  # hit, miss, bypass
)

cache_invalidations = Counter(
    "cache_invalidations_total",
    "Cache partition invalidations",
    ["partition"],
)

# Database metrics
db_operations = Counter(
    "db_operations_total",
    "Total database write operations",
    ["operation"],  # insert, update, delete
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, not_found, error"""
    booking_attempts.labels(status=status).inc()


def record_status_change(kind: str):
    booking_status_changes.labels(kind=kind).inc()


def record_db_operation(operation: str):
    """Record database operation. Operation: insert, update, delete"""
    db_operations.labels(operation=operation).inc()


def record_cache_operation(partition: str, result: str):
    cache_operations.labels(partition=partition, result=result).inc()


def record_cache_invalidation(partition: str):
    cache_invalidations.labels(partition=partition).inc()
