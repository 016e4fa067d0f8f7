"""ValidationHandler interface (Hexagonal Architecture)"""

from abc import ABC, abstractmethod

from .models import ValidationContext, ValidationResult


class ValidationHandler(ABC):
    """Port interface for one validation concern.

    Handlers are independent of each other and hold no per-request state,
    so a single instance can serve concurrent requests and handlers can be
    reordered or omitted freely.
    """

    name: str = "handler"

    @abstractmethod
    def validate(self, context: ValidationContext) -> ValidationResult:
        """Evaluate this handler's rules against the context.

        Args:
            context: Order, customer, products and product types

        Returns:
            ValidationResult with this handler's errors, warnings and metadata
        """
        pass
