"""Order pipeline - turns a create-order request into a paid, stocked order.

Steps:
1. Check request shape (no repository access)
2. Look up customer
3. Batch-resolve products
4. Classify product types
5. Reject unavailable products
6. Build the PENDING order aggregate
7. Run the complete validation chain
8. Charge the payment
9. Mark the payment completed
10. Reserve stock with atomic conditional decrements
11. Persist the order
12. Return order, payment result and validation result

Stock is reserved before the order is stored. A reservation that loses a
race releases the units already reserved for this order and voids the
payment, so a failed request leaves no order and no stock change behind.
"""

import logging
import time
from collections.abc import Mapping
from typing import Optional, Union

from config import Settings, get_settings
from domain.catalog.classification import AttributeClassifier, ProductClassifier
from domain.catalog.models import Product, ProductType
from domain.catalog.ports import CustomerRepository, ProductRepository
from domain.orders.order import InvalidOrder, Order, new_order, new_order_line
from domain.orders.errors import InvalidOrderLine
from domain.orders.ports import OrderRepository
from domain.payments.models import PaymentResult, parse_payment_data
from domain.payments.processor import PaymentProcessor
from domain.payments.registry import PaymentStrategyRegistry, UnsupportedPaymentMethod
from domain.validation.chain import ValidationChain
from domain.validation.models import ValidationContext, ValidationResult
from observability.metrics import (
    order_failures_total,
    orders_created_total,
    stock_conflicts_total,
    validation_duration_seconds,
)
from .results import (
    CreateOrderOutcome,
    CreateOrderRequest,
    CreateOrderSuccess,
    OrderErrorCode,
    OrderFailure,
    StockCompensation,
)


logger = logging.getLogger(__name__)


class OrderPipeline:
    """Create-order orchestration.

    Holds only collaborators, no per-request state; one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        orders: OrderRepository,
        products: ProductRepository,
        customers: CustomerRepository,
        payments: PaymentStrategyRegistry,
        classifier: Optional[ProductClassifier] = None,
        validation_chain: Optional[ValidationChain] = None,
        settings: Optional[Settings] = None
    ):
        self.orders = orders
        self.products = products
        self.customers = customers
        self.payments = payments
        self.classifier = classifier or AttributeClassifier()
        self.settings = settings or get_settings()
        self.validation_chain = validation_chain or ValidationChain.complete(self.settings)

    def create_order(self, request: CreateOrderRequest) -> CreateOrderOutcome:
        shape_error = self.check_request_shape(request)
        if shape_error:
            return self._fail(OrderErrorCode.INVALID_REQUEST, shape_error)

        customer = self.customers.find_by_id(request.customer_id)
        if customer is None:
            return self._fail(
                OrderErrorCode.CUSTOMER_NOT_FOUND,
                f"Customer not found: {request.customer_id}"
            )

        requested_ids = list(dict.fromkeys(line.product_id for line in request.lines))
        products = {p.id: p for p in self.products.find_by_ids(requested_ids)}
        missing = tuple(pid for pid in requested_ids if pid not in products)
        if missing:
            return self._fail(
                OrderErrorCode.PRODUCTS_NOT_FOUND,
                f"Products not found: {', '.join(missing)}",
                missing_product_ids=missing
            )

        product_types = self.classifier.classify_all(products.values())

        for product_id in requested_ids:
            product = products[product_id]
            if not product.is_available():
                return self._fail(
                    OrderErrorCode.PRODUCT_UNAVAILABLE,
                    f"Product not available: {product.name}",
                    details={"product_id": product.id}
                )

        order = self.build_order(request, products)
        if isinstance(order, InvalidOrder):
            return self._fail(OrderErrorCode.INVALID_REQUEST, order.reason)

        context = ValidationContext(
            order=order,
            customer=customer,
            products=list(products.values()),
            product_types=product_types,
            customer_meta=request.customer_meta,
        )
        started = time.perf_counter()
        validation = self.validation_chain.handle(context)
        validation_duration_seconds.observe(time.perf_counter() - started)

        if validation.warnings:
            logger.info(
                f"Order {order.order_id} validation warnings: {validation.warnings}",
                extra={"order_id": order.order_id}
            )
        if not validation.is_valid:
            return self._fail(
                OrderErrorCode.VALIDATION_FAILED,
                "; ".join(validation.errors),
                validation_result=validation
            )

        try:
            processor = PaymentProcessor(self.payments.create_strategy(order.payment_method))
        except UnsupportedPaymentMethod as e:
            return self._fail(OrderErrorCode.PAYMENT_FAILED, str(e), validation_result=validation)

        payment_data = request.payment_data
        if payment_data is None or isinstance(payment_data, Mapping):
            payment_data = parse_payment_data(order.payment_method, payment_data or {})

        payment = processor.process_payment(order.total, payment_data)
        if not payment.success:
            order.fail_payment()
            return self._fail(
                OrderErrorCode.PAYMENT_FAILED,
                payment.error_message or "Payment failed",
                validation_result=validation,
                payment_result=payment
            )

        order.complete_payment()

        outcome = self.reserve_and_persist(order, product_types, processor, payment, validation)
        if isinstance(outcome, OrderFailure):
            return outcome

        orders_created_total.labels(payment_method=order.payment_method.value).inc()
        logger.info(
            f"Order {outcome.order_id} created for customer {outcome.customer_id} (total {outcome.total})",
            extra={
                "order_id": outcome.order_id,
                "customer_id": outcome.customer_id,
                "transaction_id": payment.transaction_id,
            }
        )
        return CreateOrderSuccess(
            order=outcome,
            payment_result=payment,
            validation_result=validation,
        )

    @staticmethod
    def check_request_shape(request: CreateOrderRequest) -> Optional[str]:
        """Structural checks that need no repository access.

        Returns:
            Error message, or None if the request is well-formed
        """
        if not request.customer_id:
            return "Customer ID is required"
        if not request.lines:
            return "Order must have at least one item"
        if not request.payment_method:
            return "Payment method is required"
        for line in request.lines:
            if not line.product_id:
                return "Product ID is required for all items"
            if isinstance(line.quantity, bool) or not isinstance(line.quantity, int):
                return f"Item quantity must be an integer (got {line.quantity!r})"
            if line.quantity <= 0:
                return "Item quantity must be greater than 0"
        return None

    @staticmethod
    def build_order(
        request: CreateOrderRequest,
        products: dict[str, Product]
    ) -> Union[Order, InvalidOrder]:
        """Build the PENDING aggregate with prices taken from the catalog.

        Repeated products in the request are merged into one line by the
        aggregate's add_item.
        """
        first, *rest = request.lines
        line = new_order_line(first.product_id, first.quantity, products[first.product_id].price)
        if isinstance(line, InvalidOrder):
            return line

        order = new_order(request.customer_id, [line], request.payment_method)
        if isinstance(order, InvalidOrder):
            return order

        for item in rest:
            try:
                order.add_item(item.product_id, item.quantity, products[item.product_id].price)
            except InvalidOrderLine as e:
                return InvalidOrder(str(e), field="lines")
        return order

    def reserve_and_persist(
        self,
        order: Order,
        product_types: dict[str, ProductType],
        processor: PaymentProcessor,
        payment: PaymentResult,
        validation: ValidationResult
    ) -> Union[Order, OrderFailure]:
        """Reserve stock for every line, then store the order.

        Digital lines reserve nothing. On a refused reservation the units
        already reserved are released and the payment is voided.
        """
        reserved: list[tuple[str, int]] = []
        try:
            for line in order.lines:
                if product_types.get(line.product_id) == ProductType.DIGITAL:
                    continue
                if not self.products.reserve_stock(line.product_id, line.quantity):
                    released = tuple(pid for pid, _ in reserved)
                    self._release(reserved)
                    void = processor.void_payment(payment.transaction_id)
                    stock_conflicts_total.inc()
                    return self._fail(
                        OrderErrorCode.STOCK_CONFLICT,
                        f"Stock for product {line.product_id} was taken by a concurrent order; "
                        f"payment {payment.transaction_id} "
                        f"{'voided' if void.success else 'requires manual refund'}",
                        validation_result=validation,
                        payment_result=payment,
                        compensation=StockCompensation(
                            product_id=line.product_id,
                            transaction_id=payment.transaction_id,
                            payment_voided=void.success,
                            released_product_ids=released,
                        )
                    )
                reserved.append((line.product_id, line.quantity))

            return self.orders.create(order)
        except Exception:
            logger.error(
                f"Order {order.order_id} failed after payment; compensating",
                extra={"order_id": order.order_id, "transaction_id": payment.transaction_id},
                exc_info=True
            )
            self._compensate(processor, payment.transaction_id, reserved)
            raise

    def _compensate(
        self,
        processor: PaymentProcessor,
        transaction_id: str,
        reserved: list[tuple[str, int]]
    ) -> None:
        """Void the charge, then give back reserved stock.

        Runs while an error is propagating; a failing step is logged so the
        caller still sees the original exception.
        """
        try:
            processor.void_payment(transaction_id)
        except Exception:
            logger.exception(
                f"Void of {transaction_id} failed; payment requires manual refund",
                extra={"transaction_id": transaction_id}
            )
        try:
            self._release(reserved)
        except Exception:
            logger.exception(
                f"Stock release failed for {reserved}",
                extra={"transaction_id": transaction_id}
            )

    def _release(self, reserved: list[tuple[str, int]]) -> None:
        # Entries are popped before release; none is released twice
        while reserved:
            product_id, quantity = reserved.pop()
            self.products.release_stock(product_id, quantity)

    def _fail(self, code: OrderErrorCode, message: str, **kwargs) -> OrderFailure:
        order_failures_total.labels(error_code=code.value).inc()
        logger.warning(
            f"Order creation rejected ({code.value}): {message}",
            extra={"error_code": code.value}
        )
        return OrderFailure(error_code=code, message=message, **kwargs)
