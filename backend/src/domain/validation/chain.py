"""ValidationChain - runs validation handlers in a fixed order.

Handlers run one after another and their results are merged. The first
invalid result stops the chain: later handlers do not run, and the returned
result only reflects handlers that actually executed. Cheap, fundamental
checks (stock, payment method) therefore go first.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from config import Settings
from .models import ValidationContext, ValidationResult
from .port import ValidationHandler
from .rules import (
    BusinessRulesValidationHandler,
    CustomerValidationHandler,
    PaymentValidationHandler,
    StockValidationHandler,
)


logger = logging.getLogger(__name__)


class ValidationChain:
    """Ordered list of handlers evaluated by a single driver loop."""

    def __init__(self, handlers: Sequence[ValidationHandler]):
        if not handlers:
            raise ValueError("Validation chain requires at least one handler")
        self.handlers = tuple(handlers)

    def __len__(self) -> int:
        return len(self.handlers)

    def handle(self, context: ValidationContext) -> ValidationResult:
        """Run handlers in order, stopping after the first invalid result.

        Args:
            context: Validation context for one order

        Returns:
            Merged ValidationResult of every handler that ran
        """
        result = ValidationResult.empty()

        for handler in self.handlers:
            handler_result = handler.validate(context)
            result = result.merge(handler_result)
            logger.debug(
                f"Validation handler '{handler.name}' for order {context.order.order_id}: "
                f"valid={handler_result.is_valid}, errors={len(handler_result.errors)}, "
                f"warnings={len(handler_result.warnings)}"
            )
            if not handler_result.is_valid:
                logger.info(
                    f"Validation stopped at handler '{handler.name}' for order {context.order.order_id}",
                    extra={"order_id": context.order.order_id}
                )
                break

        return result

    def then(self, *handlers: ValidationHandler) -> "ValidationChain":
        """Return a new chain with handlers appended."""
        return ValidationChain([*self.handlers, *handlers])

    @classmethod
    def complete(
        cls,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None
    ) -> "ValidationChain":
        """Stock → Payment → Customer → BusinessRules (used by the order pipeline)."""
        business = (
            BusinessRulesValidationHandler(settings, clock)
            if clock is not None
            else BusinessRulesValidationHandler(settings)
        )
        return cls([
            StockValidationHandler(settings),
            PaymentValidationHandler(settings),
            CustomerValidationHandler(settings),
            business,
        ])

    @classmethod
    def basic(cls, settings: Optional[Settings] = None) -> "ValidationChain":
        """Payment → Customer, for callers without stock data."""
        return cls([
            PaymentValidationHandler(settings),
            CustomerValidationHandler(settings),
        ])
