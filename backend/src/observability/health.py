"""Health check utilities for ShopFlow.

Provides health and readiness checks for the database and the payment
strategy registry.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain.orders.status import PaymentMethod
from domain.payments.registry import PaymentStrategyRegistry
from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    """Health check status enum."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class ComponentHealth:
    """Health status for a single component."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None


def check_database_health(db: Session) -> ComponentHealth:
    """Check database connectivity with SELECT 1.

    Args:
        db: Database session

    Returns:
        ComponentHealth: Database health status
    """
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1"))
        latency_ms = (time.perf_counter() - start) * 1000

        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            message="Database connection OK",
            latency_ms=round(latency_ms, 2)
        )
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Database error: {str(e)}"
        )


def check_payment_methods(registry: PaymentStrategyRegistry) -> ComponentHealth:
    """Report payment methods without a registered strategy.

    Orders can still be placed with the remaining methods, so a partial
    registry is DEGRADED rather than UNHEALTHY.
    """
    missing = [m.value for m in PaymentMethod if not registry.is_registered(m)]
    if not missing:
        return ComponentHealth(status=HealthStatus.HEALTHY, message="All payment methods registered")
    if len(missing) == len(PaymentMethod):
        return ComponentHealth(status=HealthStatus.UNHEALTHY, message="No payment methods registered")
    return ComponentHealth(
        status=HealthStatus.DEGRADED,
        message=f"Payment methods unavailable: {', '.join(missing)}"
    )


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Determine overall health from component statuses.

    Args:
        components: Dictionary of component health statuses

    Returns:
        HealthStatus: Overall system health
    """
    if all(c.status == HealthStatus.HEALTHY for c in components.values()):
        return HealthStatus.HEALTHY

    if any(c.status == HealthStatus.UNHEALTHY for c in components.values()):
        return HealthStatus.UNHEALTHY

    return HealthStatus.DEGRADED
