"""Catalog and customer repository ports (Hexagonal Architecture)"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from .models import Customer, Product


class ProductRepository(ABC):
    """Port interface for product lookup and stock reservation."""

    @abstractmethod
    def find_by_ids(self, product_ids: Sequence[str]) -> list[Product]:
        """Resolve many products in one call.

        Unknown ids are simply absent from the result.
        """
        pass

    @abstractmethod
    def find_by_id(self, product_id: str) -> Optional[Product]:
        pass

    @abstractmethod
    def reserve_stock(self, product_id: str, quantity: int) -> bool:
        """Atomically decrement stock by quantity if at least quantity is left.

        Must be a single conditional operation against storage
        (decrement WHERE stock >= quantity); a separate read and write
        lets concurrent orders oversubscribe the same units.

        Returns:
            True if the stock was decremented, False if it was insufficient
            or the product does not exist
        """
        pass

    @abstractmethod
    def release_stock(self, product_id: str, quantity: int) -> None:
        """Return previously reserved units (compensation)."""
        pass


class CustomerRepository(ABC):
    """Port interface for customer lookup."""

    @abstractmethod
    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        pass
