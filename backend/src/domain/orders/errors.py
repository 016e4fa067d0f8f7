"""Order aggregate exceptions.

All aggregate rule violations derive from OrderDomainError so callers can
catch the family while still distinguishing individual cases.
"""

from typing import Optional


class OrderDomainError(Exception):
    """Base class for order aggregate rule violations."""
    pass


class InvalidTransition(OrderDomainError):
    """Raised when an order status operation is invoked with a failing guard."""

    def __init__(self, current, requested, reason: Optional[str] = None):
        self.current = current
        self.requested = requested
        message = f"Invalid transition: {current.value} -> {requested.value}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidPaymentTransition(OrderDomainError):
    """Raised when payment status is not PENDING on complete/fail."""

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Invalid payment transition: {current.value} -> {requested.value}"
        )


class OrderLocked(OrderDomainError):
    """Raised when lines are mutated after the order left PENDING."""

    def __init__(self, order_id: str, status):
        self.order_id = order_id
        self.status = status
        super().__init__(
            f"Order {order_id} is {status.value}; lines can only change while PENDING"
        )


class EmptyOrder(OrderDomainError):
    """Raised when an operation would leave an order without lines."""
    pass


class LineNotFound(OrderDomainError):
    """Raised when no line references the given product."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Item not found in order: {product_id}")


class InvalidOrderLine(OrderDomainError):
    """Raised when a line quantity or price is not positive."""
    pass
