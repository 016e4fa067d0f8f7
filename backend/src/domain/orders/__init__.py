"""Orders domain module - order aggregate, lifecycle state machines, repository port"""

from .status import (
    OrderStatus,
    PaymentStatus,
    PaymentMethod,
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    can_transition,
    can_transition_payment,
    get_allowed_transitions,
)
from .errors import (
    OrderDomainError,
    InvalidTransition,
    InvalidPaymentTransition,
    OrderLocked,
    EmptyOrder,
    LineNotFound,
    InvalidOrderLine,
)
from .order import Order, OrderLine, InvalidOrder, new_order, new_order_line
from .ports import OrderRepository

__all__ = [
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethod",
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "can_transition",
    "can_transition_payment",
    "get_allowed_transitions",
    "OrderDomainError",
    "InvalidTransition",
    "InvalidPaymentTransition",
    "OrderLocked",
    "EmptyOrder",
    "LineNotFound",
    "InvalidOrderLine",
    "Order",
    "OrderLine",
    "InvalidOrder",
    "new_order",
    "new_order_line",
    "OrderRepository",
]
