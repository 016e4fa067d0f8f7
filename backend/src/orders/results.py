"""Request and result types of the order use cases.

Every expected failure is returned as an OrderFailure carrying an error code;
only unexpected faults (storage down, bugs) are raised.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Mapping, Optional, Sequence, Union

from domain.catalog.models import CustomerMeta
from domain.orders.order import Order
from domain.orders.status import PaymentMethod
from domain.payments.models import PaymentData, PaymentResult
from domain.validation.models import ValidationResult


class OrderErrorCode(str, Enum):
    """Failure taxonomy of the order use cases"""
    INVALID_REQUEST = "INVALID_REQUEST"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    PRODUCTS_NOT_FOUND = "PRODUCTS_NOT_FOUND"
    PRODUCT_UNAVAILABLE = "PRODUCT_UNAVAILABLE"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    PAYMENT_FAILED = "PAYMENT_FAILED"
    STOCK_CONFLICT = "STOCK_CONFLICT"  # Post-payment, compensated
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    ACCESS_DENIED = "ACCESS_DENIED"
    INVALID_TRANSITION = "INVALID_TRANSITION"


@dataclass(frozen=True)
class OrderLineRequest:
    product_id: str
    quantity: int


@dataclass(frozen=True)
class CreateOrderRequest:
    """Inbound "place an order" request.

    payment_data is either a PaymentData variant or a loose mapping that is
    parsed into the variant matching payment_method.
    """
    customer_id: str
    lines: Sequence[OrderLineRequest]
    payment_method: Optional[Union[PaymentMethod, str]]
    payment_data: Optional[Union[PaymentData, Mapping[str, Any]]] = None
    customer_meta: Optional[CustomerMeta] = None


@dataclass(frozen=True)
class StockCompensation:
    """What was undone after a stock reservation lost a race post-payment."""
    product_id: str
    transaction_id: str
    payment_voided: bool
    released_product_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class CreateOrderSuccess:
    success: ClassVar[bool] = True

    order: Order
    payment_result: PaymentResult
    validation_result: ValidationResult


@dataclass(frozen=True)
class OrderFailure:
    success: ClassVar[bool] = False

    error_code: OrderErrorCode
    message: str
    validation_result: Optional[ValidationResult] = None
    payment_result: Optional[PaymentResult] = None
    missing_product_ids: tuple[str, ...] = ()
    compensation: Optional[StockCompensation] = None
    details: dict[str, Any] = field(default_factory=dict)


CreateOrderOutcome = Union[CreateOrderSuccess, OrderFailure]
