"""
Services package holding the product business logic.
"""
from .normalizer import normalize_on_create, normalize_on_update, round_money
from .product_service import ProductService, build_filter

__all__ = [
    "ProductService",
    "build_filter",
    "normalize_on_create",
    "normalize_on_update",
    "round_money",
]
