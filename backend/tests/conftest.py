"""Pytest fixtures for the order processing tests.

Provides reusable test fixtures for:
- Settings, a fixed clock and a deterministic payment registry
- Catalog data (customer, physical/digital/service products)
- In-process repositories and a wired OrderPipeline
- SQLite database session for the SQL adapters and the API

Usage:
    def test_place_order(pipeline, card_order_request):
        outcome = pipeline.create_order(card_order_request)
        assert outcome.success
"""

import sys
import os
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
if "DATABASE_URL" not in os.environ:
    os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from config import Settings
from models.base import Base
from models.customer import Customer as CustomerModel
from models.product import Product as ProductModel
from domain.catalog.models import Customer, Product, ProductType
from domain.payments.registry import default_registry
from domain.validation.chain import ValidationChain
from infrastructure.repositories import (
    InMemoryCustomerRepository,
    InMemoryOrderRepository,
    InMemoryProductRepository,
)
from orders.pipeline import OrderPipeline
from orders.results import CreateOrderRequest, OrderLineRequest


# Tuesday, inside business hours
FIXED_NOW = datetime(2026, 3, 10, 10, 30)

VALID_CARD = {
    "card_number": "4111 1111 1111 1111",
    "expiry_date": "12/30",
    "cvv": "123",
    "cardholder_name": "Maria Silva",
}


def always_approve() -> float:
    return 0.99


@pytest.fixture
def settings() -> Settings:
    return Settings(DATABASE_URL="sqlite://")


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def registry(settings, fixed_clock):
    """Payment registry whose gateways always approve."""
    return default_registry(settings, random_source=always_approve, clock=fixed_clock)


@pytest.fixture
def customer() -> Customer:
    return Customer(id="cust_1", name="Maria Silva", email="maria@example.com")


@pytest.fixture
def products() -> list[Product]:
    return [
        Product(id="prod_mouse", name="Wireless Mouse", price=Decimal("50.00"), stock=10),
        Product(id="prod_keyboard", name="Mechanical Keyboard", price=Decimal("150.00"), stock=1),
        Product(
            id="prod_course",
            name="Python Course",
            price=Decimal("200.00"),
            stock=5,
            product_type=ProductType.DIGITAL,
        ),
        Product(
            id="prod_consulting",
            name="Consultoria Tecnica",
            price=Decimal("300.00"),
            stock=2,
        ),
    ]


@pytest.fixture
def product_repo(products) -> InMemoryProductRepository:
    return InMemoryProductRepository(products)


@pytest.fixture
def customer_repo(customer) -> InMemoryCustomerRepository:
    return InMemoryCustomerRepository([customer])


@pytest.fixture
def order_repo() -> InMemoryOrderRepository:
    return InMemoryOrderRepository()


@pytest.fixture
def pipeline(order_repo, product_repo, customer_repo, registry, settings, fixed_clock) -> OrderPipeline:
    return OrderPipeline(
        orders=order_repo,
        products=product_repo,
        customers=customer_repo,
        payments=registry,
        validation_chain=ValidationChain.complete(settings, clock=fixed_clock),
        settings=settings,
    )


@pytest.fixture
def card_order_request() -> CreateOrderRequest:
    """2 × Wireless Mouse paid by card (total 100.00)."""
    return CreateOrderRequest(
        customer_id="cust_1",
        lines=[OrderLineRequest("prod_mouse", 2)],
        payment_method="CREDIT_CARD",
        payment_data=VALID_CARD,
    )


# =============================================================================
# Database fixtures
# =============================================================================

@pytest.fixture
def db_engine():
    """In-memory SQLite engine shared across threads (one connection)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory, customer, products) -> Generator[Session, None, None]:
    """Session over a database seeded with the catalog fixtures."""
    session = session_factory()
    session.add(CustomerModel(id=customer.id, name=customer.name, email=customer.email))
    for product in products:
        session.add(ProductModel(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            status=product.status.value,
            product_type=product.product_type.value if product.product_type else None,
        ))
    session.commit()

    try:
        yield session
    finally:
        session.close()
