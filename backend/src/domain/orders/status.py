"""Order status state machines.

Order lifecycle:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING|CONFIRMED → CANCELLED

Payment lifecycle:
    PENDING → COMPLETED|FAILED|CANCELLED

Terminal States: DELIVERED, CANCELLED (order); COMPLETED, FAILED, CANCELLED (payment)
"""

from enum import Enum
from typing import List


class OrderStatus(str, Enum):
    """Order status enumeration."""
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(str, Enum):
    """Payment status enumeration."""
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class PaymentMethod(str, Enum):
    """Supported payment methods."""
    CREDIT_CARD = "CREDIT_CARD"
    PIX = "PIX"
    BOLETO = "BOLETO"


ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: [
        OrderStatus.CONFIRMED,
        OrderStatus.CANCELLED
    ],
    OrderStatus.CONFIRMED: [
        OrderStatus.PROCESSING,
        OrderStatus.CANCELLED
    ],
    OrderStatus.PROCESSING: [OrderStatus.SHIPPED],
    OrderStatus.SHIPPED: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],  # Terminal state
    OrderStatus.CANCELLED: [],  # Terminal state
}

ALLOWED_PAYMENT_TRANSITIONS = {
    PaymentStatus.PENDING: [
        PaymentStatus.COMPLETED,
        PaymentStatus.FAILED,
        PaymentStatus.CANCELLED
    ],
    PaymentStatus.COMPLETED: [],
    PaymentStatus.FAILED: [],
    PaymentStatus.CANCELLED: [],
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def can_transition(current_status: OrderStatus, new_status: OrderStatus) -> bool:
    """Check if an order status transition is allowed.

    Only the status table is consulted here; the SHIPPED transition has an
    additional payment guard enforced by the Order aggregate.

    Example:
        >>> can_transition(OrderStatus.PENDING, OrderStatus.CONFIRMED)
        True
        >>> can_transition(OrderStatus.DELIVERED, OrderStatus.PROCESSING)
        False
    """
    return new_status in ALLOWED_TRANSITIONS.get(current_status, [])


def can_transition_payment(current_status: PaymentStatus, new_status: PaymentStatus) -> bool:
    return new_status in ALLOWED_PAYMENT_TRANSITIONS.get(current_status, [])


def get_allowed_transitions(status: OrderStatus) -> List[OrderStatus]:
    """Get list of allowed target statuses from a given status."""
    return ALLOWED_TRANSITIONS.get(status, [])
