"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Gauge, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Connection metrics
connection_attempts = Counter(
    'mongodb_connection_attempts_total',
    'MongoDB connection attempts',
    ['result']  # success, failure
)

connection_cache_hits = Counter(
    'mongodb_connection_cache_hits_total',
    'Calls served from the cached MongoDB handle'
)

connection_ready = Gauge(
    'mongodb_connection_ready',
    'Whether a resolved MongoDB handle is cached (1=yes, 0=no)'
)

# Write path metrics
document_writes = Counter(
    'document_writes_total',
    'Document write operations',
    ['collection', 'operation']  # insert, update, delete
)

validation_failures = Counter(
    'validation_failures_total',
    'Writes rejected before persistence',
    ['collection', 'field']
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_connection_attempt(success: bool):
    result = "success" if success else "failure"
    connection_attempts.labels(result=result).inc()
    connection_ready.set(1 if success else 0)


def record_write(collection: str, operation: str):
    """Record document write. Operation: insert, update, delete"""
    document_writes.labels(collection=collection, operation=operation).inc()


def record_validation_failure(collection: str, field: str):
    validation_failures.labels(collection=collection, field=field).inc()
