"""
Models package for database document structures.
These models represent how data is stored in MongoDB.
"""
from .product import (
    DESCRIPTION_MAX_LENGTH,
    IMAGE_URL_PATTERN,
    LEGACY_IMAGE_FIELD,
    MAX_INT64,
    MAX_PRICE,
    NAME_MAX_LENGTH,
    WRITABLE_FIELDS,
    ProductDocument,
)

__all__ = [
    "ProductDocument",
    "WRITABLE_FIELDS",
    "LEGACY_IMAGE_FIELD",
    "MAX_INT64",
    "MAX_PRICE",
    "NAME_MAX_LENGTH",
    "DESCRIPTION_MAX_LENGTH",
    "IMAGE_URL_PATTERN",
]
