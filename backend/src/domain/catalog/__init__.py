"""Catalog domain module - products, customers, product type classification"""

from .models import Product, ProductStatus, ProductType, Customer, CustomerMeta
from .ports import ProductRepository, CustomerRepository
from .classification import ProductClassifier, NameHeuristicClassifier, AttributeClassifier

__all__ = [
    "Product",
    "ProductStatus",
    "ProductType",
    "Customer",
    "CustomerMeta",
    "ProductRepository",
    "CustomerRepository",
    "ProductClassifier",
    "NameHeuristicClassifier",
    "AttributeClassifier",
]
