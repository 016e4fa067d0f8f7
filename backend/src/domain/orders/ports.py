"""OrderRepository port (Hexagonal Architecture)"""

from abc import ABC, abstractmethod
from typing import Optional

from .order import Order


class OrderRepository(ABC):
    """Port interface for order persistence.

    Implementations store the aggregate as a whole (header and lines) and
    return rehydrated Order instances.
    """

    @abstractmethod
    def create(self, order: Order) -> Order:
        """Persist a new order.

        Returns:
            The stored order
        """
        pass

    @abstractmethod
    def update(self, order: Order) -> Order:
        """Persist status/line changes of an existing order."""
        pass

    @abstractmethod
    def find_by_id(self, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    def find_by_customer(
        self,
        customer_id: str,
        limit: int = 50,
        offset: int = 0
    ) -> list[Order]:
        """List a customer's orders, newest first."""
        pass
