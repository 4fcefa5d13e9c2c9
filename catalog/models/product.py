"""
Product data models for database documents.
These represent the actual structure of documents stored in MongoDB.
"""
import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000
IMAGE_URL_PATTERN = re.compile(r"^https?://\S+$", re.IGNORECASE)

# BSON stores integers as signed 64-bit values.
MAX_INT64 = 2 ** 63 - 1
# Largest accepted price or bulkPrice.
MAX_PRICE = 1_000_000_000_000

# Fields a client may set; everything else in a request body is ignored.
WRITABLE_FIELDS = (
    "id",
    "name",
    "description",
    "price",
    "bulkPrice",
    "bulkQty",
    "category",
    "inStock",
    "images",
)

# Singular key used by the oldest documents for the image list.
LEGACY_IMAGE_FIELD = "image"


class ProductDocument(BaseModel):
    """
    Product document model representing the MongoDB document structure.
    Optional fields stay optional so legacy records still render.
    """
    model_config = ConfigDict(extra="ignore")

    id: int = Field(..., description="Caller-supplied product ID")
    name: str = Field(..., description="Product name")
    description: str = Field(default="", description="Product description")
    price: float = Field(..., description="Unit price")
    bulkPrice: Optional[float] = Field(None, description="Unit price when buying bulkQty or more")
    bulkQty: Optional[int] = Field(None, description="Quantity that unlocks bulkPrice")
    category: Optional[str] = Field(None, description="Product category")
    inStock: bool = Field(default=True, description="Whether the product can be ordered")
    images: List[str] = Field(default_factory=list, description="Product image URLs")

    # Timestamps
    createdAt: Optional[datetime] = Field(None, description="Creation timestamp")
    updatedAt: Optional[datetime] = Field(None, description="Last update timestamp")
