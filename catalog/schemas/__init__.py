"""
Schemas package for API request/response validation.
These models define the structure of data sent to and from the API endpoints.
"""

# Product schemas
from .product import PRODUCT_EXAMPLE, ProductResponse, ProductsListResponse

# Common schemas
from .common import (
    ErrorResponse,
    FieldErrorDetail,
    HealthCheckResponse,
    RootResponse,
    SuccessResponse
)

__all__ = [
    # Product schemas
    "PRODUCT_EXAMPLE",
    "ProductResponse",
    "ProductsListResponse",

    # Common schemas
    "ErrorResponse",
    "FieldErrorDetail",
    "HealthCheckResponse",
    "RootResponse",
    "SuccessResponse"
]
