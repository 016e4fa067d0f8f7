"""Payments domain module - payment strategies, processor and strategy registry"""

from .models import (
    PaymentResult,
    PaymentData,
    CreditCardData,
    PixData,
    BoletoData,
    parse_payment_data,
)
from .strategies import (
    PaymentStrategy,
    CreditCardPaymentStrategy,
    PixPaymentStrategy,
    BoletoPaymentStrategy,
)
from .processor import PaymentProcessor
from .registry import PaymentStrategyRegistry, UnsupportedPaymentMethod, default_registry

__all__ = [
    "PaymentResult",
    "PaymentData",
    "CreditCardData",
    "PixData",
    "BoletoData",
    "parse_payment_data",
    "PaymentStrategy",
    "CreditCardPaymentStrategy",
    "PixPaymentStrategy",
    "BoletoPaymentStrategy",
    "PaymentProcessor",
    "PaymentStrategyRegistry",
    "UnsupportedPaymentMethod",
    "default_registry",
]
