"""Catalog and customer domain models.

Products and customers are owned by other parts of the system; the order
pipeline only reads them (and adjusts stock through the repository port).
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class ProductStatus(str, Enum):
    """Product availability status"""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class ProductType(str, Enum):
    """Fulfillment category driving the stock policy"""
    PHYSICAL = "PHYSICAL"  # Shipped goods, stock is real inventory
    DIGITAL = "DIGITAL"    # Downloads/courses, no scarcity
    SERVICE = "SERVICE"    # Bookable services, stock counts free slots


@dataclass(frozen=True)
class Product:
    """Read model of a catalog product as seen by the order pipeline."""
    id: str
    name: str
    price: Decimal
    stock: int
    description: str = ""
    category_id: Optional[str] = None
    status: ProductStatus = ProductStatus.ACTIVE
    product_type: Optional[ProductType] = None

    def is_available(self) -> bool:
        return self.status == ProductStatus.ACTIVE and self.stock > 0


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    email: str


@dataclass(frozen=True)
class CustomerMeta:
    """Optional per-request customer data used by the customer rules."""
    credit_limit: Optional[Decimal] = None
    delivery_region: Optional[str] = None
    is_vip: Optional[bool] = None
