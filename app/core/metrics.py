"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking creation attempts',
    ['status']  # success, conflict, invalid, error
)

booking_transitions = Counter(
    'booking_transitions_total',
    'Booking lifecycle transitions',
    ['action', 'result']  # start/finish/cancel, ok/not_found/rejected
)

resource_operations = Counter(
    'resource_operations_total',
    'Resource registry mutations',
    ['operation']  # create, update, soft_delete, hard_delete
)

login_attempts = Counter(
    'login_attempts_total',
    'Login attempts',
    ['result']  # success, failure
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, conflict, invalid, error"""
    booking_attempts.labels(status=status).inc()


def record_booking_transition(action: str, result: str):
    booking_transitions.labels(action=action, result=result).inc()


def record_resource_operation(operation: str):
    resource_operations.labels(operation=operation).inc()


def record_login(success: bool):
    login_attempts.labels(result="success" if success else "failure").inc()
