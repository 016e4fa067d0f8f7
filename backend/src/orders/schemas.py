"""Pydantic schemas for the Orders API

Request bodies are deliberately loose about values the order pipeline checks
itself (empty lines, non-positive quantities, unknown payment methods) so
those come back as INVALID_REQUEST rather than a generic 422.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, ClassVar, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from domain.catalog.models import CustomerMeta
from domain.orders.order import Order
from domain.orders.status import OrderStatus, PaymentMethod, PaymentStatus
from domain.payments.models import BoletoData, CreditCardData, PaymentData, PaymentResult, PixData
from domain.validation.models import ValidationResult
from .results import (
    CreateOrderRequest,
    CreateOrderSuccess,
    OrderErrorCode,
    OrderFailure,
    OrderLineRequest,
)


# ============================================================================
# Request Schemas
# ============================================================================

class OrderLineIn(BaseModel):
    product_id: str
    quantity: int


class CustomerMetaIn(BaseModel):
    """Optional customer data for credit limit / region / VIP rules"""
    credit_limit: Optional[Decimal] = None
    delivery_region: Optional[str] = None
    is_vip: Optional[bool] = None


class PaymentDataIn(BaseModel):
    """Method-specific payment fields; keys may be snake_case or camelCase.

    Formats (card digits, expiry, PIX key) are checked by the payment
    strategy, not here.
    """
    domain_type: ClassVar[type]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_domain(self) -> PaymentData:
        return self.domain_type(**self.model_dump(exclude={"method"}))


class CreditCardDataIn(PaymentDataIn):
    domain_type: ClassVar[type] = CreditCardData

    method: Literal["CREDIT_CARD"]
    card_number: str
    expiry_date: str
    cvv: str
    cardholder_name: str


class PixDataIn(PaymentDataIn):
    domain_type: ClassVar[type] = PixData

    method: Literal["PIX"]
    pix_key: str
    user_document: str


class BoletoDataIn(PaymentDataIn):
    domain_type: ClassVar[type] = BoletoData

    method: Literal["BOLETO"]
    user_document: str
    user_name: str
    user_address: str


PaymentDataUnion = Annotated[
    Union[CreditCardDataIn, PixDataIn, BoletoDataIn],
    Field(discriminator="method")
]

PAYMENT_METHODS = frozenset(m.value for m in PaymentMethod)


class CreateOrderIn(BaseModel):
    """Request body of POST /orders

    payment_data is parsed into the variant named by payment_method. With an
    unknown payment_method it is dropped and the pipeline answers
    INVALID_REQUEST.
    """
    customer_id: str
    lines: List[OrderLineIn] = Field(default_factory=list)
    payment_method: str
    payment_data: Optional[PaymentDataUnion] = None
    customer_meta: Optional[CustomerMetaIn] = None

    model_config = ConfigDict(extra='forbid')

    @model_validator(mode="before")
    @classmethod
    def tag_payment_data(cls, data):
        if not isinstance(data, dict) or not isinstance(data.get("payment_data"), dict):
            return data
        method = data.get("payment_method")
        if isinstance(method, str) and method in PAYMENT_METHODS:
            return {**data, "payment_data": {**data["payment_data"], "method": method}}
        return {**data, "payment_data": None}

    def to_request(self) -> CreateOrderRequest:
        meta = None
        if self.customer_meta is not None:
            meta = CustomerMeta(**self.customer_meta.model_dump())
        return CreateOrderRequest(
            customer_id=self.customer_id,
            lines=[OrderLineRequest(line.product_id, line.quantity) for line in self.lines],
            payment_method=self.payment_method,
            payment_data=self.payment_data.to_domain() if self.payment_data else None,
            customer_meta=meta,
        )


class OrderStatusUpdate(BaseModel):
    """Request body of PATCH /orders/{order_id}/status"""
    status: OrderStatus
    customer_id: Optional[str] = Field(None, description="If set, the order must belong to this customer")

    model_config = ConfigDict(extra='forbid')


# ============================================================================
# Response Schemas
# ============================================================================

class OrderLineResponse(BaseModel):
    line_id: str
    product_id: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    order_id: str
    customer_id: str
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    total: Decimal
    lines: List[OrderLineResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls.model_validate(order)


class PaymentResultResponse(BaseModel):
    success: bool
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None
    processing_time_ms: float = 0.0

    model_config = ConfigDict(from_attributes=True)


class ValidationResultResponse(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResultResponse":
        return cls(**result.to_dict())


class CreateOrderResponse(BaseModel):
    """Response body of a successful POST /orders"""
    order: OrderResponse
    payment_result: PaymentResultResponse
    validation_result: ValidationResultResponse

    @classmethod
    def from_success(cls, outcome: CreateOrderSuccess) -> "CreateOrderResponse":
        return cls(
            order=OrderResponse.from_order(outcome.order),
            payment_result=PaymentResultResponse.model_validate(outcome.payment_result),
            validation_result=ValidationResultResponse.from_result(outcome.validation_result),
        )


class StockCompensationResponse(BaseModel):
    product_id: str
    transaction_id: str
    payment_voided: bool
    released_product_ids: List[str] = Field(default_factory=list)


class OrderErrorResponse(BaseModel):
    """Body of every order failure response"""
    error_code: OrderErrorCode
    message: str
    validation_result: Optional[ValidationResultResponse] = None
    payment_result: Optional[PaymentResultResponse] = None
    missing_product_ids: List[str] = Field(default_factory=list)
    compensation: Optional[StockCompensationResponse] = None
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_failure(cls, failure: OrderFailure) -> "OrderErrorResponse":
        validation = failure.validation_result
        payment: Optional[PaymentResult] = failure.payment_result
        compensation = failure.compensation
        return cls(
            error_code=failure.error_code,
            message=failure.message,
            validation_result=ValidationResultResponse.from_result(validation) if validation else None,
            payment_result=PaymentResultResponse.model_validate(payment) if payment else None,
            missing_product_ids=list(failure.missing_product_ids),
            compensation=StockCompensationResponse(
                product_id=compensation.product_id,
                transaction_id=compensation.transaction_id,
                payment_voided=compensation.payment_voided,
                released_product_ids=list(compensation.released_product_ids),
            ) if compensation else None,
            details=dict(failure.details),
        )


class OrderListResponse(BaseModel):
    items: List[OrderResponse]
    limit: int
    offset: int
