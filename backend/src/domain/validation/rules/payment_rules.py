"""Payment validation rules.

- payment method must be one of the supported methods
- order total must reach the minimum order value
- high-value credit card and boleto orders warn about extra processing time
"""

from typing import Optional

from config import Settings, get_settings
from domain.orders.status import PaymentMethod
from domain.validation.models import ValidationContext, ValidationResult
from domain.validation.port import ValidationHandler


RECOGNIZED_PAYMENT_METHODS = frozenset(method.value for method in PaymentMethod)


class PaymentValidationHandler(ValidationHandler):

    name = "payment"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def validate(self, context: ValidationContext) -> ValidationResult:
        errors = []
        warnings = []

        order = context.order
        method = getattr(order.payment_method, "value", order.payment_method)
        total = order.total
        minimum = self.settings.MINIMUM_ORDER_VALUE

        if method not in RECOGNIZED_PAYMENT_METHODS:
            errors.append(f"Invalid payment method: {method}")

        if total < minimum:
            errors.append(
                f"Order total {total:.2f} is below the minimum order value of {minimum:.2f}"
            )

        if method == PaymentMethod.CREDIT_CARD.value and total > self.settings.CREDIT_CARD_REVIEW_THRESHOLD:
            warnings.append(
                "High-value credit card order - may require additional verification"
            )

        if method == PaymentMethod.BOLETO.value and total > self.settings.BOLETO_REVIEW_THRESHOLD:
            warnings.append(
                f"Boletos above {self.settings.BOLETO_REVIEW_THRESHOLD:.2f} "
                f"take longer to clear - expect extra processing time"
            )

        return ValidationResult.from_findings(
            errors,
            warnings,
            metadata={
                "payment_validation": {
                    "method": method,
                    "amount": total,
                    "minimum_order_value": minimum,
                }
            },
        )
