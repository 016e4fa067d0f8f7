"""In-process repositories.

Used by tests and local tooling. Each repository guards its state with a lock
so reserve_stock keeps the same check-and-decrement atomicity as the SQL
adapter.
"""

import copy
import threading
from dataclasses import replace
from typing import Iterable, Optional, Sequence

from domain.catalog.models import Customer, Product, ProductStatus
from domain.catalog.ports import CustomerRepository, ProductRepository
from domain.orders.order import Order
from domain.orders.ports import OrderRepository
from .order_repository import OrderNotPersisted


class InMemoryProductRepository(ProductRepository):

    def __init__(self, products: Iterable[Product] = ()):
        self._lock = threading.Lock()
        self._products = {p.id: p for p in products}

    def add(self, product: Product) -> None:
        with self._lock:
            self._products[product.id] = product

    def find_by_ids(self, product_ids: Sequence[str]) -> list[Product]:
        with self._lock:
            return [self._products[pid] for pid in product_ids if pid in self._products]

    def find_by_id(self, product_id: str) -> Optional[Product]:
        with self._lock:
            return self._products.get(product_id)

    def reserve_stock(self, product_id: str, quantity: int) -> bool:
        with self._lock:
            product = self._products.get(product_id)
            if product is None or quantity <= 0 or product.stock < quantity:
                return False
            remaining = product.stock - quantity
            self._products[product_id] = replace(
                product,
                stock=remaining,
                status=ProductStatus.OUT_OF_STOCK if remaining == 0 else product.status
            )
            return True

    def release_stock(self, product_id: str, quantity: int) -> None:
        with self._lock:
            product = self._products.get(product_id)
            if product is None or quantity <= 0:
                return
            status = product.status
            if status == ProductStatus.OUT_OF_STOCK:
                status = ProductStatus.ACTIVE
            self._products[product_id] = replace(product, stock=product.stock + quantity, status=status)


class InMemoryCustomerRepository(CustomerRepository):

    def __init__(self, customers: Iterable[Customer] = ()):
        self._customers = {c.id: c for c in customers}

    def add(self, customer: Customer) -> None:
        self._customers[customer.id] = customer

    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        return self._customers.get(customer_id)


class InMemoryOrderRepository(OrderRepository):
    """Stores deep copies; callers never share an instance with the store."""

    def __init__(self):
        self._lock = threading.Lock()
        self._orders: dict[str, Order] = {}

    def __len__(self) -> int:
        return len(self._orders)

    def create(self, order: Order) -> Order:
        with self._lock:
            if order.order_id in self._orders:
                raise ValueError(f"Order already exists: {order.order_id}")
            self._orders[order.order_id] = copy.deepcopy(order)
        return copy.deepcopy(order)

    def update(self, order: Order) -> Order:
        with self._lock:
            if order.order_id not in self._orders:
                raise OrderNotPersisted(f"Order not found: {order.order_id}")
            self._orders[order.order_id] = copy.deepcopy(order)
        return copy.deepcopy(order)

    def find_by_id(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return copy.deepcopy(order) if order else None

    def find_by_customer(
        self,
        customer_id: str,
        limit: int = 50,
        offset: int = 0
    ) -> list[Order]:
        with self._lock:
            matches = [o for o in self._orders.values() if o.customer_id == customer_id]
        matches.sort(key=lambda o: o.created_at, reverse=True)
        return [copy.deepcopy(o) for o in matches[offset:offset + limit]]
