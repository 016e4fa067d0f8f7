"""SQLAlchemy Models for ShopFlow"""

from .base import Base
from .customer import Customer
from .product import Product
from .order import Order, OrderLine

__all__ = [
    "Base",
    "Customer",
    "Product",
    "Order",
    "OrderLine",
]
