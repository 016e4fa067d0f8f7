"""Observability module.

Provides structured logging, request correlation and Prometheus metrics.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    orders_created_total,
    order_failures_total,
    validation_duration_seconds,
    payments_total,
    payment_latency_ms,
    payment_voids_total,
    stock_conflicts_total,
    order_status_transitions_total,
)
from .request_id import (
    request_id_var,
    get_request_id,
    set_request_id,
    generate_request_id,
    bind_order_context,
    get_order_context,
)
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "orders_created_total",
    "order_failures_total",
    "validation_duration_seconds",
    "payments_total",
    "payment_latency_ms",
    "payment_voids_total",
    "stock_conflicts_total",
    "order_status_transitions_total",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    "bind_order_context",
    "get_order_context",
    # Middleware
    "RequestIDMiddleware",
]
