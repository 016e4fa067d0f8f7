"""Order aggregate.

The Order owns its lines and both status machines. State only changes through
the named operations below; each one checks its guard and raises an
OrderDomainError subclass instead of silently doing nothing.

Lifecycle:
1. Built by the order pipeline with new_order() (PENDING / payment PENDING)
2. Payment completed by the pipeline, then persisted
3. Moved through CONFIRMED → PROCESSING → SHIPPED → DELIVERED by operations
4. Optionally CANCELLED while PENDING or CONFIRMED
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Union
from uuid import uuid4

from .errors import (
    EmptyOrder,
    InvalidOrderLine,
    InvalidPaymentTransition,
    InvalidTransition,
    LineNotFound,
    OrderLocked,
)
from .status import OrderStatus, PaymentMethod, PaymentStatus, can_transition_payment


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_order_id() -> str:
    return f"order_{uuid4().hex}"


def generate_line_id() -> str:
    return f"item_{uuid4().hex}"


@dataclass(frozen=True)
class OrderLine:
    """A single order line. Immutable; the aggregate swaps lines on change."""
    line_id: str
    product_id: str
    quantity: int
    unit_price: Decimal

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class InvalidOrder:
    """Construction failure returned by the smart constructors."""
    reason: str
    field: Optional[str] = None


def new_order_line(
    product_id: str,
    quantity: Any,
    unit_price: Any,
    line_id: Optional[str] = None
) -> Union[OrderLine, InvalidOrder]:
    """Build an OrderLine from untrusted input.

    Returns:
        The OrderLine, or InvalidOrder describing the first violated rule
    """
    if not product_id:
        return InvalidOrder("Product ID is required for all items", field="product_id")

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return InvalidOrder(f"Item quantity must be an integer (got {quantity!r})", field="quantity")
    if quantity <= 0:
        return InvalidOrder("Item quantity must be greater than 0", field="quantity")

    try:
        price = Decimal(str(unit_price))
    except (InvalidOperation, ValueError, TypeError):
        return InvalidOrder(f"Invalid item price {unit_price!r}", field="unit_price")
    if not price.is_finite() or price <= 0:
        return InvalidOrder("Item price must be greater than 0", field="unit_price")

    return OrderLine(
        line_id=line_id or generate_line_id(),
        product_id=product_id,
        quantity=quantity,
        unit_price=price,
    )


def new_order(
    customer_id: str,
    lines: Iterable[OrderLine],
    payment_method: Any,
    order_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> Union["Order", InvalidOrder]:
    """Build a fresh PENDING order from untrusted input.

    Returns:
        The Order, or InvalidOrder describing the first violated rule

    Example:
        >>> line = new_order_line("p1", 2, "15.00")
        >>> order = new_order("c1", [line], PaymentMethod.PIX)
        >>> order.total
        Decimal('30.00')
    """
    if not customer_id:
        return InvalidOrder("Order must have a customer", field="customer_id")

    line_list = list(lines)
    if not line_list:
        return InvalidOrder("Order must have at least one item", field="lines")

    for line in line_list:
        if line.quantity <= 0:
            return InvalidOrder("Item quantity must be greater than 0", field="quantity")
        if line.unit_price <= 0:
            return InvalidOrder("Item price must be greater than 0", field="unit_price")

    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        return InvalidOrder(f"Invalid payment method: {payment_method}", field="payment_method")

    created = now or utcnow()
    return Order(
        order_id=order_id or generate_order_id(),
        customer_id=customer_id,
        lines=line_list,
        payment_method=method,
        created_at=created,
        updated_at=created,
    )


class Order:
    """Order aggregate root.

    The constructor trusts its input and is used to rehydrate stored orders;
    use new_order() for anything coming from outside the domain.
    """

    def __init__(
        self,
        order_id: str,
        customer_id: str,
        lines: Iterable[OrderLine],
        payment_method: PaymentMethod,
        status: OrderStatus = OrderStatus.PENDING,
        payment_status: PaymentStatus = PaymentStatus.PENDING,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self._order_id = order_id
        self._customer_id = customer_id
        self._lines = list(lines)
        self._payment_method = payment_method
        self._status = status
        self._payment_status = payment_status
        self._created_at = created_at or utcnow()
        self._updated_at = updated_at or self._created_at

    def __repr__(self) -> str:
        return (
            f"Order(order_id={self._order_id!r}, status={self._status.value}, "
            f"payment_status={self._payment_status.value}, total={self.total})"
        )

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def order_id(self) -> str:
        return self._order_id

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def lines(self) -> tuple[OrderLine, ...]:
        return tuple(self._lines)

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def payment_method(self) -> PaymentMethod:
        return self._payment_method

    @property
    def payment_status(self) -> PaymentStatus:
        return self._payment_status

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def total(self) -> Decimal:
        """Sum of quantity × unit price over all lines. Always derived."""
        return sum((line.line_total for line in self._lines), Decimal("0"))

    def find_line(self, product_id: str) -> Optional[OrderLine]:
        for line in self._lines:
            if line.product_id == product_id:
                return line
        return None

    # ------------------------------------------------------------------
    # Guards
    # ------------------------------------------------------------------

    def can_be_cancelled(self) -> bool:
        return self._status in (OrderStatus.PENDING, OrderStatus.CONFIRMED)

    def can_be_shipped(self) -> bool:
        return (
            self._status == OrderStatus.PROCESSING
            and self._payment_status == PaymentStatus.COMPLETED
        )

    def can_be_delivered(self) -> bool:
        return self._status == OrderStatus.SHIPPED

    # ------------------------------------------------------------------
    # Order status transitions
    # ------------------------------------------------------------------

    def confirm(self) -> None:
        if self._status != OrderStatus.PENDING:
            raise InvalidTransition(self._status, OrderStatus.CONFIRMED)
        self._set_status(OrderStatus.CONFIRMED)

    def start_processing(self) -> None:
        if self._status != OrderStatus.CONFIRMED:
            raise InvalidTransition(self._status, OrderStatus.PROCESSING)
        self._set_status(OrderStatus.PROCESSING)

    def ship(self) -> None:
        if self._status != OrderStatus.PROCESSING:
            raise InvalidTransition(self._status, OrderStatus.SHIPPED)
        if self._payment_status != PaymentStatus.COMPLETED:
            raise InvalidTransition(
                self._status,
                OrderStatus.SHIPPED,
                reason=f"payment is {self._payment_status.value}"
            )
        self._set_status(OrderStatus.SHIPPED)

    def deliver(self) -> None:
        if not self.can_be_delivered():
            raise InvalidTransition(self._status, OrderStatus.DELIVERED)
        self._set_status(OrderStatus.DELIVERED)

    def cancel(self) -> None:
        """Cancel the order.

        A PENDING payment is cancelled with it. A COMPLETED payment stays
        COMPLETED; refunding it is up to the caller.
        """
        if not self.can_be_cancelled():
            raise InvalidTransition(self._status, OrderStatus.CANCELLED)
        if can_transition_payment(self._payment_status, PaymentStatus.CANCELLED):
            self._payment_status = PaymentStatus.CANCELLED
        self._set_status(OrderStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Payment status transitions
    # ------------------------------------------------------------------

    def complete_payment(self) -> None:
        self._set_payment_status(PaymentStatus.COMPLETED)

    def fail_payment(self) -> None:
        self._set_payment_status(PaymentStatus.FAILED)

    # ------------------------------------------------------------------
    # Line mutation (PENDING only)
    # ------------------------------------------------------------------

    def add_item(self, product_id: str, quantity: int, unit_price: Any) -> OrderLine:
        """Add a line, or grow the existing line for the same product.

        Returns:
            The resulting line for product_id
        """
        self._ensure_editable()
        existing = self.find_line(product_id)
        if existing:
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise InvalidOrderLine("Item quantity must be greater than 0")
            line = replace(existing, quantity=existing.quantity + quantity)
            self._lines[self._lines.index(existing)] = line
        else:
            candidate = new_order_line(product_id, quantity, unit_price)
            if isinstance(candidate, InvalidOrder):
                raise InvalidOrderLine(candidate.reason)
            line = candidate
            self._lines.append(line)
        self._touch()
        return line

    def remove_item(self, product_id: str) -> None:
        self._ensure_editable()
        line = self.find_line(product_id)
        if line is None:
            raise LineNotFound(product_id)
        if len(self._lines) == 1:
            raise EmptyOrder("Order must have at least one item")
        self._lines.remove(line)
        self._touch()

    def update_item_quantity(self, product_id: str, quantity: int) -> None:
        self._ensure_editable()
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidOrderLine("Quantity must be greater than 0")
        line = self.find_line(product_id)
        if line is None:
            raise LineNotFound(product_id)
        self._lines[self._lines.index(line)] = replace(line, quantity=quantity)
        self._touch()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Convert order to dictionary representation"""
        return {
            "order_id": self._order_id,
            "customer_id": self._customer_id,
            "lines": [
                {
                    "line_id": line.line_id,
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "unit_price": str(line.unit_price),
                }
                for line in self._lines
            ],
            "status": self._status.value,
            "payment_method": self._payment_method.value,
            "payment_status": self._payment_status.value,
            "total": str(self.total),
            "created_at": self._created_at.isoformat(),
            "updated_at": self._updated_at.isoformat(),
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _ensure_editable(self) -> None:
        if self._status != OrderStatus.PENDING:
            raise OrderLocked(self._order_id, self._status)

    def _set_status(self, new_status: OrderStatus) -> None:
        self._status = new_status
        self._touch()

    def _set_payment_status(self, new_status: PaymentStatus) -> None:
        if not can_transition_payment(self._payment_status, new_status):
            raise InvalidPaymentTransition(self._payment_status, new_status)
        self._payment_status = new_status
        self._touch()

    def _touch(self) -> None:
        self._updated_at = utcnow()
