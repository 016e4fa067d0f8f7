"""Orders module - create-order pipeline, order service and REST endpoints"""

from .results import (
    OrderErrorCode,
    OrderLineRequest,
    CreateOrderRequest,
    CreateOrderSuccess,
    OrderFailure,
    StockCompensation,
    CreateOrderOutcome,
)
from .pipeline import OrderPipeline
from .service import OrderService

__all__ = [
    "OrderErrorCode",
    "OrderLineRequest",
    "CreateOrderRequest",
    "CreateOrderSuccess",
    "OrderFailure",
    "StockCompensation",
    "CreateOrderOutcome",
    "OrderPipeline",
    "OrderService",
]
