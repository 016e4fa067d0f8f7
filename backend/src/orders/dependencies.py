"""FastAPI dependencies wiring the order use cases to SQL repositories"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database import get_db
from domain.payments.registry import PaymentStrategyRegistry, default_registry
from infrastructure.repositories import (
    SqlCustomerRepository,
    SqlOrderRepository,
    SqlProductRepository,
)
from .pipeline import OrderPipeline
from .service import OrderService


@lru_cache()
def get_payment_registry() -> PaymentStrategyRegistry:
    """Application-wide payment registry, built once from settings."""
    return default_registry(get_settings())


def get_order_pipeline(
    db: Session = Depends(get_db),
    registry: PaymentStrategyRegistry = Depends(get_payment_registry),
    settings: Settings = Depends(get_settings)
) -> OrderPipeline:
    return OrderPipeline(
        orders=SqlOrderRepository(db),
        products=SqlProductRepository(db),
        customers=SqlCustomerRepository(db),
        payments=registry,
        settings=settings,
    )


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(SqlOrderRepository(db))
