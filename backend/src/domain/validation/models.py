"""Validation models: result monoid and per-run context"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from domain.catalog.models import Customer, CustomerMeta, Product, ProductType
from domain.orders.order import Order


@dataclass
class ValidationResult:
    """Outcome of one or more validation handlers.

    Results combine with merge(): validity is the conjunction, errors and
    warnings concatenate in handler order, metadata is a shallow union where
    the later result wins on key collision. empty() is the identity.
    """
    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def from_findings(
        cls,
        errors: Iterable[str],
        warnings: Iterable[str] = (),
        metadata: Optional[dict[str, Any]] = None
    ) -> "ValidationResult":
        """Build a result whose validity follows from the absence of errors."""
        error_list = list(errors)
        return cls(
            is_valid=not error_list,
            errors=error_list,
            warnings=list(warnings),
            metadata=dict(metadata or {}),
        )

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=[*self.errors, *other.errors],
            warnings=[*self.warnings, *other.warnings],
            metadata={**self.metadata, **other.metadata},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "metadata": dict(self.metadata),
        }


@dataclass
class ValidationContext:
    """Context object passed to validation handlers.

    Built fresh for every validation run and never persisted.
    """
    order: Order
    customer: Customer
    products: list[Product] = field(default_factory=list)
    product_types: dict[str, ProductType] = field(default_factory=dict)
    customer_meta: Optional[CustomerMeta] = None

    def product_by_id(self, product_id: str) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def product_type_of(self, product_id: str) -> ProductType:
        """Type for product_id; unclassified products count as PHYSICAL."""
        return self.product_types.get(product_id, ProductType.PHYSICAL)
