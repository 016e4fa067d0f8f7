"""Validation rule handlers.

Each module contains one ValidationHandler covering a single concern.
"""

from .stock_rules import StockValidationHandler
from .payment_rules import PaymentValidationHandler
from .customer_rules import CustomerValidationHandler
from .business_rules import BusinessRulesValidationHandler

__all__ = [
    "StockValidationHandler",
    "PaymentValidationHandler",
    "CustomerValidationHandler",
    "BusinessRulesValidationHandler",
]
