"""Business rule validation.

- at most MAX_ORDER_LINES lines per order
- a product may appear on one line only
- mixed fulfillment categories warn
- high-value orders outside business hours warn about delayed processing
"""

from collections import Counter
from datetime import datetime
from typing import Callable, Optional

from config import Settings, get_settings
from domain.catalog.models import ProductType
from domain.validation.models import ValidationContext, ValidationResult
from domain.validation.port import ValidationHandler


class BusinessRulesValidationHandler(ValidationHandler):

    name = "business_rules"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.settings = settings or get_settings()
        self.clock = clock

    def is_business_hours(self, moment: datetime) -> bool:
        return self.settings.BUSINESS_HOURS_START <= moment.hour <= self.settings.BUSINESS_HOURS_END

    def validate(self, context: ValidationContext) -> ValidationResult:
        errors = []
        warnings = []

        lines = context.order.lines
        max_lines = self.settings.MAX_ORDER_LINES

        if len(lines) > max_lines:
            errors.append(f"Maximum of {max_lines} items per order")

        # The aggregate merges repeated products; this catches callers
        # that built lines some other way.
        counts = Counter(line.product_id for line in lines)
        duplicated = sorted(pid for pid, count in counts.items() if count > 1)
        if duplicated:
            errors.append(
                f"The same product cannot be added more than once: {', '.join(duplicated)}"
            )

        types_in_order = {
            context.product_types[line.product_id]
            for line in lines
            if line.product_id in context.product_types
        }
        has_physical = ProductType.PHYSICAL in types_in_order
        has_digital = ProductType.DIGITAL in types_in_order
        has_service = ProductType.SERVICE in types_in_order

        if has_physical and has_digital:
            warnings.append(
                "Order mixes physical and digital products - consider separate fulfillment"
            )
        if has_service and (has_physical or has_digital):
            warnings.append(
                "Order contains services and products - check scheduling"
            )

        business_hours = self.is_business_hours(self.clock())
        if context.order.total > self.settings.HIGH_VALUE_ORDER_THRESHOLD and not business_hours:
            warnings.append(
                "High-value order outside business hours - processing may be delayed"
            )

        return ValidationResult.from_findings(
            errors,
            warnings,
            metadata={
                "business_rules_validation": {
                    "item_count": len(lines),
                    "product_types": sorted(t.value for t in types_in_order),
                    "is_business_hours": business_hours,
                }
            },
        )
