"""FastAPI middleware for observability.

Provides request ID generation and access logging for all HTTP requests.
Order and customer ids found in the URL are bound to the request context so
every log line of the request carries them.
"""

import re
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .request_id import (
    bind_order_context,
    clear_order_context,
    generate_request_id,
    set_request_id,
)
from .logging_config import get_logger

logger = get_logger(__name__)

# Matched against the raw path; routing has not run yet
_ORDER_PATH = re.compile(r"^/orders/(?P<order_id>[^/]+)")
_CUSTOMER_PATH = re.compile(r"^/customers/(?P<customer_id>[^/]+)/orders")


def ids_from_request(path: str, query_customer_id: Optional[str] = None) -> dict[str, str]:
    """Order/customer ids named by a request URL.

    Example:
        >>> ids_from_request("/orders/order_1/status", "cust_1")
        {'order_id': 'order_1', 'customer_id': 'cust_1'}
    """
    ids = {}
    for pattern in (_ORDER_PATH, _CUSTOMER_PATH):
        match = pattern.match(path)
        if match:
            ids.update(match.groupdict())
    if query_customer_id and "customer_id" not in ids:
        ids["customer_id"] = query_customer_id
    return ids


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware to generate and inject request IDs."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request with request ID and order context.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response: HTTP response with X-Request-ID header
        """
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        set_request_id(request_id)
        clear_order_context()
        bind_order_context(**ids_from_request(
            request.url.path,
            request.query_params.get("customer_id")
        ))

        started = time.perf_counter()
        logger.info(
            f"{request.method} {request.url.path}",
            extra={"method": request.method, "path": request.url.path}
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.url.path} failed: {e}",
                extra={
                    "error_type": type(e).__name__,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                },
                exc_info=True
            )
            raise

        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            }
        )

        response.headers["X-Request-ID"] = request_id
        return response
