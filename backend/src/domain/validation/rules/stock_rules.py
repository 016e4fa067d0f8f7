"""Stock validation rules.

The policy depends on the product type:
- PHYSICAL: stock must cover the quantity; under twice the quantity warns
- DIGITAL: checked against a large sentinel capacity, no real scarcity
- SERVICE: stock counts free slots, which must cover the quantity
"""

from typing import Optional

from config import Settings, get_settings
from domain.catalog.models import ProductType
from domain.validation.models import ValidationContext, ValidationResult
from domain.validation.port import ValidationHandler


class StockValidationHandler(ValidationHandler):
    """Checks every line against the referenced product's availability."""

    name = "stock"

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def validate(self, context: ValidationContext) -> ValidationResult:
        errors = []
        warnings = []
        stock_info = {}

        for line in context.order.lines:
            product = context.product_by_id(line.product_id)
            if product is None:
                errors.append(f"Product {line.product_id} not found")
                continue

            product_type = context.product_type_of(product.id)
            if product_type == ProductType.DIGITAL:
                available = self.settings.DIGITAL_STOCK_CAPACITY
            else:
                available = product.stock

            stock_info[product.id] = {
                "available": available,
                "requested": line.quantity,
                "type": product_type.value,
            }

            if product_type == ProductType.PHYSICAL:
                if available < line.quantity:
                    errors.append(
                        f"Insufficient stock for {product.name}. "
                        f"Available: {available}, requested: {line.quantity}"
                    )
                elif available < line.quantity * 2:
                    warnings.append(f"Low stock for {product.name}")

            elif product_type == ProductType.DIGITAL:
                if available < line.quantity:
                    errors.append(f"Digital product {product.name} is not available")

            elif product_type == ProductType.SERVICE:
                if available < line.quantity:
                    errors.append(
                        f"Service {product.name} does not have enough available slots"
                    )

        return ValidationResult.from_findings(
            errors,
            warnings,
            metadata={"stock_validation": stock_info},
        )
