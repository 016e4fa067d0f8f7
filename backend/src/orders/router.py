"""Orders API Router - create, read and status update endpoints.

Use-case failures come back as OrderErrorResponse bodies with the HTTP status
mapped from their error code.
"""

from typing import Union

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from observability.request_id import bind_order_context
from .dependencies import get_order_pipeline, get_order_service
from .pipeline import OrderPipeline
from .results import OrderErrorCode, OrderFailure
from .schemas import (
    CreateOrderIn,
    CreateOrderResponse,
    OrderErrorResponse,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from .service import OrderService


router = APIRouter(tags=["orders"])


ERROR_STATUS_CODES = {
    OrderErrorCode.INVALID_REQUEST: 400,
    OrderErrorCode.CUSTOMER_NOT_FOUND: 404,
    OrderErrorCode.PRODUCTS_NOT_FOUND: 404,
    OrderErrorCode.ORDER_NOT_FOUND: 404,
    OrderErrorCode.ACCESS_DENIED: 403,
    OrderErrorCode.PRODUCT_UNAVAILABLE: 409,
    OrderErrorCode.VALIDATION_FAILED: 422,
    OrderErrorCode.PAYMENT_FAILED: 402,
    OrderErrorCode.STOCK_CONFLICT: 409,
    OrderErrorCode.INVALID_TRANSITION: 409,
}

ERROR_RESPONSES = {
    code: {"model": OrderErrorResponse}
    for code in sorted(set(ERROR_STATUS_CODES.values()))
}


def failure_response(failure: OrderFailure) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS_CODES[failure.error_code],
        content=OrderErrorResponse.from_failure(failure).model_dump(mode="json")
    )


@router.post(
    "/orders",
    response_model=CreateOrderResponse,
    status_code=201,
    responses=ERROR_RESPONSES,
    summary="Place an order",
    description="""
    Validate, charge and store a new order.

    **Flow:** customer lookup → product lookup → validation chain →
    payment → stock reservation → persist.

    Prices are taken from the catalog; repeated products are merged into
    one line.
    """
)
def create_order(
    body: CreateOrderIn,
    pipeline: OrderPipeline = Depends(get_order_pipeline)
) -> Union[CreateOrderResponse, JSONResponse]:
    bind_order_context(customer_id=body.customer_id)
    outcome = pipeline.create_order(body.to_request())
    if not outcome.success:
        return failure_response(outcome)
    return CreateOrderResponse.from_success(outcome)


@router.get(
    "/orders/{order_id}",
    response_model=OrderResponse,
    responses={404: {"model": OrderErrorResponse}, 403: {"model": OrderErrorResponse}},
    summary="Get order"
)
def get_order(
    order_id: str,
    customer_id: Union[str, None] = Query(None, description="Restrict to orders of this customer"),
    service: OrderService = Depends(get_order_service)
) -> Union[OrderResponse, JSONResponse]:
    found = service.get_order(order_id, customer_id)
    if isinstance(found, OrderFailure):
        return failure_response(found)
    return OrderResponse.from_order(found)


@router.get(
    "/customers/{customer_id}/orders",
    response_model=OrderListResponse,
    summary="List a customer's orders, newest first"
)
def list_customer_orders(
    customer_id: str,
    limit: int = Query(50, ge=1, le=200, description="Results per page"),
    offset: int = Query(0, ge=0),
    service: OrderService = Depends(get_order_service)
) -> OrderListResponse:
    orders = service.list_customer_orders(customer_id, limit=limit, offset=offset)
    return OrderListResponse(
        items=[OrderResponse.from_order(order) for order in orders],
        limit=limit,
        offset=offset
    )


@router.patch(
    "/orders/{order_id}/status",
    response_model=OrderResponse,
    responses={
        403: {"model": OrderErrorResponse},
        404: {"model": OrderErrorResponse},
        409: {"model": OrderErrorResponse},
    },
    summary="Move an order to a new status",
    description="""
    Allowed moves: PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED,
    and PENDING/CONFIRMED → CANCELLED. Shipping requires a completed payment.
    """
)
def update_order_status(
    order_id: str,
    body: OrderStatusUpdate,
    service: OrderService = Depends(get_order_service)
) -> Union[OrderResponse, JSONResponse]:
    updated = service.update_order_status(order_id, body.status, customer_id=body.customer_id)
    if isinstance(updated, OrderFailure):
        return failure_response(updated)
    return OrderResponse.from_order(updated)
