"""Customer validation rules.

- customer email must be well-formed, name at least 2 characters
- credit card orders may not exceed a given credit limit
- a given delivery region must be served
- VIP customers get an informational warning
"""

import re
from typing import Optional

from config import Settings, get_settings
from domain.orders.status import PaymentMethod
from domain.validation.models import ValidationContext, ValidationResult
from domain.validation.port import ValidationHandler


EMAIL_PATTERN = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s]+")


class CustomerValidationHandler(ValidationHandler):

    name = "customer"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def is_valid_delivery_region(self, region: str) -> bool:
        return region in self.settings.DELIVERY_REGIONS

    def validate(self, context: ValidationContext) -> ValidationResult:
        errors = []
        warnings = []

        customer = context.customer
        order = context.order

        if not customer.email or not EMAIL_PATTERN.fullmatch(customer.email):
            errors.append("Customer email is invalid")

        if not customer.name or len(customer.name.strip()) < 2:
            errors.append("Customer name must have at least 2 characters")

        meta = context.customer_meta
        if meta is not None:
            if (
                meta.credit_limit is not None
                and order.payment_method == PaymentMethod.CREDIT_CARD
                and order.total > meta.credit_limit
            ):
                errors.append(
                    f"Order total exceeds credit limit of {meta.credit_limit:.2f}"
                )

            if meta.delivery_region and not self.is_valid_delivery_region(meta.delivery_region):
                errors.append(f"Delivery region not served: {meta.delivery_region}")

            if meta.is_vip:
                warnings.append("VIP customer - apply discount or free shipping if eligible")

        return ValidationResult.from_findings(
            errors,
            warnings,
            metadata={
                "customer_validation": {
                    "customer_id": customer.id,
                    "email": customer.email,
                    "is_vip": bool(meta and meta.is_vip),
                }
            },
        )
