"""PaymentProcessor - context object wrapping the active payment strategy."""

import logging
from decimal import Decimal
from typing import Any

from domain.orders.status import PaymentMethod
from observability.metrics import payment_latency_ms, payment_voids_total, payments_total
from .models import PaymentResult
from .strategies import PaymentStrategy


logger = logging.getLogger(__name__)


class PaymentProcessor:
    """Delegates to one strategy; the strategy can be swapped at runtime.

    Swapping supports retry-with-fallback flows (e.g. card declined, offer
    boleto). The order pipeline itself never retries across methods.
    """

    def __init__(self, strategy: PaymentStrategy):
        self.strategy = strategy

    def set_strategy(self, strategy: PaymentStrategy) -> None:
        self.strategy = strategy

    def current_method(self) -> PaymentMethod:
        return self.strategy.method()

    def validate_payment_data(self, data: Any) -> bool:
        return self.strategy.validate(data)

    def process_payment(self, amount: Decimal, data: Any) -> PaymentResult:
        method = self.current_method().value
        result = self.strategy.process(amount, data)

        payments_total.labels(
            payment_method=method,
            status="success" if result.success else "failure"
        ).inc()
        payment_latency_ms.labels(payment_method=method).observe(result.processing_time_ms)

        if result.success:
            logger.info(
                f"Payment of {amount} via {method} succeeded",
                extra={"payment_method": method, "transaction_id": result.transaction_id}
            )
        else:
            logger.warning(
                f"Payment of {amount} via {method} failed: {result.error_message}",
                extra={"payment_method": method}
            )

        return result

    def void_payment(self, transaction_id: str) -> PaymentResult:
        method = self.current_method().value
        result = self.strategy.void(transaction_id)
        payment_voids_total.labels(
            payment_method=method,
            status="success" if result.success else "failure"
        ).inc()
        logger.info(
            f"Void of {transaction_id} via {method}: success={result.success}",
            extra={"payment_method": method, "transaction_id": transaction_id}
        )
        return result
