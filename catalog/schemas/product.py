"""
Product API schemas for responses.
Request bodies are validated by the normalizer, not by these models.
"""
from typing import List

from pydantic import BaseModel, Field

from ..models.product import ProductDocument

PRODUCT_EXAMPLE = {
    "id": 1,
    "name": "Widget",
    "description": "A small widget",
    "price": 9.99,
    "bulkPrice": 8.5,
    "bulkQty": 10,
    "category": "tools",
    "inStock": True,
    "images": ["https://example.com/widget.jpg"],
}


class ProductResponse(BaseModel):
    """Response schema for a single product."""
    success: bool = Field(True, description="Operation success status")
    data: ProductDocument = Field(..., description="The product")


class ProductsListResponse(BaseModel):
    """Response schema for product list with pagination."""
    success: bool = Field(True, description="Operation success status")
    count: int = Field(..., description="Number of products in this page")
    total: int = Field(..., description="Total number of products matching filters")
    page: int = Field(..., description="Current page number")
    pages: int = Field(..., description="Total number of pages")
    data: List[ProductDocument] = Field(..., description="Products in this page")
