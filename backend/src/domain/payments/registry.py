"""
Payment Strategy Registry - resolution of payment strategies by method

The registry maps payment methods to strategy factories. It is a plain value
handed to the order pipeline at construction time, so every application (or
test) owns its own registry and nothing is shared process-wide.
"""

import random
from datetime import datetime
from typing import Callable, Dict, Optional

from config import Settings, get_settings
from domain.orders.status import PaymentMethod
from .strategies import (
    BoletoPaymentStrategy,
    Clock,
    CreditCardPaymentStrategy,
    PaymentStrategy,
    PixPaymentStrategy,
    RandomSource,
)


StrategyFactory = Callable[[], PaymentStrategy]


class UnsupportedPaymentMethod(ValueError):
    """Raised when no strategy is registered for a payment method."""

    def __init__(self, method):
        self.method = method
        super().__init__(f"Unsupported payment method: {getattr(method, 'value', method)}")


class PaymentStrategyRegistry:
    """
    Registry of payment strategy factories.

    Usage:
        registry = PaymentStrategyRegistry()
        registry.register(PaymentMethod.PIX, PixPaymentStrategy)

        strategy = registry.create_strategy(PaymentMethod.PIX)
        result = strategy.process(amount, pix_data)

    Thread-safety: read operations are safe once registration is done.
    Register strategies while wiring the application, before serving requests.
    """

    def __init__(self):
        self._factories: Dict[PaymentMethod, StrategyFactory] = {}

    def register(self, method: PaymentMethod, factory: StrategyFactory) -> None:
        """
        Register a strategy factory for a payment method.

        Raises:
            ValueError: If factory is not callable
            RuntimeError: If method is already registered (prevents accidental override)
        """
        if not callable(factory):
            raise ValueError(f"Strategy factory for {method} must be callable")

        method = PaymentMethod(method)
        if method in self._factories:
            raise RuntimeError(
                f"Payment method '{method.value}' is already registered. "
                f"Use unregister() first if you need to replace it."
            )

        self._factories[method] = factory

    def unregister(self, method: PaymentMethod) -> None:
        self._factories.pop(PaymentMethod(method), None)

    def create_strategy(self, method) -> PaymentStrategy:
        """
        Get a strategy instance for a payment method.

        Raises:
            UnsupportedPaymentMethod: If method is unknown or not registered
        """
        try:
            key = PaymentMethod(method)
        except ValueError:
            raise UnsupportedPaymentMethod(method) from None

        factory = self._factories.get(key)
        if factory is None:
            raise UnsupportedPaymentMethod(key)
        return factory()

    def is_registered(self, method) -> bool:
        try:
            return PaymentMethod(method) in self._factories
        except ValueError:
            return False

    def available_methods(self) -> list[PaymentMethod]:
        return sorted(self._factories.keys(), key=lambda m: m.value)


def default_registry(
    settings: Optional[Settings] = None,
    random_source: RandomSource = random.random,
    clock: Clock = datetime.now
) -> PaymentStrategyRegistry:
    """Registry with the card, PIX and boleto strategies configured from settings."""
    settings = settings or get_settings()
    registry = PaymentStrategyRegistry()
    registry.register(
        PaymentMethod.CREDIT_CARD,
        lambda: CreditCardPaymentStrategy(
            decline_rate=settings.CREDIT_CARD_DECLINE_RATE,
            random_source=random_source,
            clock=clock,
        ),
    )
    registry.register(
        PaymentMethod.PIX,
        lambda: PixPaymentStrategy(
            failure_rate=settings.PIX_FAILURE_RATE,
            random_source=random_source,
        ),
    )
    registry.register(PaymentMethod.BOLETO, BoletoPaymentStrategy)
    return registry
