"""Product type classification policies.

The stock rules need to know whether a product is physical, digital or a
service. Where that comes from is a deployment decision, so the pipeline
receives a ProductClassifier instead of deciding itself.
"""

import re
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .models import Product, ProductType


class ProductClassifier(ABC):
    """Port interface: product → ProductType. Must be deterministic."""

    @abstractmethod
    def classify(self, product: Product) -> ProductType:
        pass

    def classify_all(self, products: Iterable[Product]) -> dict[str, ProductType]:
        return {product.id: self.classify(product) for product in products}


DIGITAL_NAME_TOKENS = frozenset({"curso", "course", "ebook", "digital"})
SERVICE_NAME_TOKENS = frozenset({
    "consultoria", "consulting", "serviço", "servico", "service", "aula", "lesson"
})

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


class NameHeuristicClassifier(ProductClassifier):
    """Classify by words in the product name.

    Placeholder policy for catalogs that carry no type metadata. Digital
    tokens win over service tokens; anything else is PHYSICAL.
    """

    def __init__(
        self,
        digital_tokens: Iterable[str] = DIGITAL_NAME_TOKENS,
        service_tokens: Iterable[str] = SERVICE_NAME_TOKENS
    ):
        self.digital_tokens = frozenset(t.lower() for t in digital_tokens)
        self.service_tokens = frozenset(t.lower() for t in service_tokens)

    def classify(self, product: Product) -> ProductType:
        tokens = set(_TOKEN_RE.findall(product.name.lower()))
        if tokens & self.digital_tokens:
            return ProductType.DIGITAL
        if tokens & self.service_tokens:
            return ProductType.SERVICE
        return ProductType.PHYSICAL


class AttributeClassifier(ProductClassifier):
    """Use the product's stored type, falling back to another policy."""

    def __init__(self, fallback: Optional[ProductClassifier] = None):
        self.fallback = fallback or NameHeuristicClassifier()

    def classify(self, product: Product) -> ProductType:
        if product.product_type is not None:
            return product.product_type
        return self.fallback.classify(product)
