"""Repository adapters for the order, product and customer ports"""

from .product_repository import SqlProductRepository
from .customer_repository import SqlCustomerRepository
from .order_repository import SqlOrderRepository, OrderNotPersisted
from .memory import (
    InMemoryProductRepository,
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
)

__all__ = [
    "SqlProductRepository",
    "SqlCustomerRepository",
    "SqlOrderRepository",
    "OrderNotPersisted",
    "InMemoryProductRepository",
    "InMemoryCustomerRepository",
    "InMemoryOrderRepository",
]
