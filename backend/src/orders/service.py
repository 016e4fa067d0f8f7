"""Order service - queries and status updates for existing orders."""

import logging
from typing import Optional, Union

from domain.orders.errors import InvalidTransition
from domain.orders.order import Order
from domain.orders.ports import OrderRepository
from domain.orders.status import OrderStatus
from observability.metrics import order_status_transitions_total
from .results import OrderErrorCode, OrderFailure


logger = logging.getLogger(__name__)


# Target status → aggregate operation name
STATUS_OPERATIONS = {
    OrderStatus.CONFIRMED: "confirm",
    OrderStatus.PROCESSING: "start_processing",
    OrderStatus.SHIPPED: "ship",
    OrderStatus.DELIVERED: "deliver",
    OrderStatus.CANCELLED: "cancel",
}


class OrderService:
    """Service for order operations after creation."""

    def __init__(self, orders: OrderRepository):
        self.orders = orders

    def get_order(
        self,
        order_id: str,
        customer_id: Optional[str] = None
    ) -> Union[Order, OrderFailure]:
        """Get an order by ID.

        Args:
            order_id: Order ID
            customer_id: If given, the order must belong to this customer

        Returns:
            Order, or OrderFailure (ORDER_NOT_FOUND / ACCESS_DENIED)
        """
        if not order_id:
            return OrderFailure(OrderErrorCode.INVALID_REQUEST, "Order ID is required")

        order = self.orders.find_by_id(order_id)
        if order is None:
            return OrderFailure(OrderErrorCode.ORDER_NOT_FOUND, f"Order not found: {order_id}")

        if customer_id and order.customer_id != customer_id:
            return OrderFailure(OrderErrorCode.ACCESS_DENIED, "Access denied")

        return order

    def list_customer_orders(
        self,
        customer_id: str,
        limit: int = 50,
        offset: int = 0
    ) -> list[Order]:
        return self.orders.find_by_customer(customer_id, limit=limit, offset=offset)

    def update_order_status(
        self,
        order_id: str,
        target_status: OrderStatus,
        customer_id: Optional[str] = None
    ) -> Union[Order, OrderFailure]:
        """Move an order to target_status through the aggregate's operation.

        Returns:
            Updated Order, or OrderFailure (ORDER_NOT_FOUND, ACCESS_DENIED,
            INVALID_TRANSITION)
        """
        found = self.get_order(order_id, customer_id)
        if isinstance(found, OrderFailure):
            return found
        order = found

        previous = order.status
        operation = STATUS_OPERATIONS.get(OrderStatus(target_status))
        if operation is None:
            return OrderFailure(
                OrderErrorCode.INVALID_TRANSITION,
                f"Invalid transition: {previous.value} -> {OrderStatus(target_status).value}"
            )

        try:
            getattr(order, operation)()
        except InvalidTransition as e:
            logger.info(
                f"Rejected status change for order {order_id}: {e}",
                extra={"order_id": order_id}
            )
            return OrderFailure(OrderErrorCode.INVALID_TRANSITION, str(e))

        updated = self.orders.update(order)

        order_status_transitions_total.labels(
            from_status=previous.value,
            to_status=updated.status.value
        ).inc()
        logger.info(
            f"Order {order_id} status changed from {previous.value} to {updated.status.value}",
            extra={"order_id": order_id}
        )
        return updated
