"""Prometheus metrics for the order pipeline.

Defines operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

# Order creation metrics
orders_created_total = Counter(
    "shopflow_orders_created_total",
    "Total orders accepted by the order pipeline",
    ["payment_method"]
)

order_failures_total = Counter(
    "shopflow_order_failures_total",
    "Total rejected order creation requests",
    ["error_code"]  # INVALID_REQUEST, VALIDATION_FAILED, PAYMENT_FAILED, ...
)

validation_duration_seconds = Histogram(
    "shopflow_validation_duration_seconds",
    "Time spent running the order validation chain in seconds",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Payment metrics
payments_total = Counter(
    "shopflow_payments_total",
    "Payment attempts",
    ["payment_method", "status"]  # status: success|failure
)

payment_latency_ms = Histogram(
    "shopflow_payment_latency_ms",
    "Payment processing latency in milliseconds",
    ["payment_method"],
    buckets=[1, 5, 10, 25, 50, 100, 250, 500, 1000, 2500]
)

payment_voids_total = Counter(
    "shopflow_payment_voids_total",
    "Compensating payment voids",
    ["payment_method", "status"]
)

# Stock metrics
stock_conflicts_total = Counter(
    "shopflow_stock_conflicts_total",
    "Stock reservations refused after payment (concurrent oversubscription)"
)

# Lifecycle metrics
order_status_transitions_total = Counter(
    "shopflow_order_status_transitions_total",
    "Order status transitions applied",
    ["from_status", "to_status"]
)
