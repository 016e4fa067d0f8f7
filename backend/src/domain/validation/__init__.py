"""Validation domain module.

Validates order drafts before payment: stock, payment, customer and business
rules, composed by ValidationChain with short-circuit and merge semantics.
"""

from .models import ValidationResult, ValidationContext
from .port import ValidationHandler
from .chain import ValidationChain
from .rules import (
    StockValidationHandler,
    PaymentValidationHandler,
    CustomerValidationHandler,
    BusinessRulesValidationHandler,
)

__all__ = [
    "ValidationResult",
    "ValidationContext",
    "ValidationHandler",
    "ValidationChain",
    "StockValidationHandler",
    "PaymentValidationHandler",
    "CustomerValidationHandler",
    "BusinessRulesValidationHandler",
]
