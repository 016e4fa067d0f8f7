"""Request context for log correlation.

The request id and the order/customer the request is about live in
ContextVars, so they follow the request through sync handlers running in the
threadpool as well as async code. RequestIDFilter copies them onto every log
record.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
order_id_var: ContextVar[Optional[str]] = ContextVar("order_id", default=None)
customer_id_var: ContextVar[Optional[str]] = ContextVar("customer_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID v4)."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID, or "no-request-id" outside a request."""
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def bind_order_context(
    order_id: Optional[str] = None,
    customer_id: Optional[str] = None
) -> None:
    """Attach the order and/or customer of the current request.

    Only the ids given are changed.
    """
    if order_id is not None:
        order_id_var.set(order_id)
    if customer_id is not None:
        customer_id_var.set(customer_id)


def clear_order_context() -> None:
    order_id_var.set(None)
    customer_id_var.set(None)


def get_order_context() -> dict[str, str]:
    """Ids bound to the current request, omitting unset ones."""
    context = {"order_id": order_id_var.get(), "customer_id": customer_id_var.get()}
    return {key: value for key, value in context.items() if value}
