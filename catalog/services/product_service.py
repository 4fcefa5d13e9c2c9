"""
Product query service.

Turns caller-supplied filter and pagination parameters into MongoDB reads,
runs the single-document writes, and formats every record before it leaves.
"""
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Awaitable, Dict, Mapping, Optional, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..models.product import LEGACY_IMAGE_FIELD, MAX_INT64
from ..utils.exceptions import ConflictError, NotFoundError, StoreError, ValidationError, field_error
from ..utils.serializers import format_product, format_products
from .normalizer import normalize_on_create, normalize_on_update

logger = logging.getLogger(__name__)

T = TypeVar("T")

ALL_CATEGORIES = "all"


def build_filter(category: Optional[str] = None, search: Optional[str] = None) -> Dict[str, Any]:
    """Build the MongoDB filter for a product listing."""
    filter_query: Dict[str, Any] = {}

    category = category.strip() if category is not None else ""
    if category and category != ALL_CATEGORIES:
        filter_query["category"] = category

    if search is not None and search.strip():
        pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
        filter_query["$or"] = [{"name": pattern}, {"description": pattern}]

    return filter_query


class ProductService:
    """CRUD and listing operations over the products collection."""

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        default_page_size: int = 250,
        max_page_size: int = 250,
    ):
        self.collection = collection
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    async def _run(self, operation: Awaitable[T], action: str) -> T:
        try:
            return await operation
        except DuplicateKeyError:
            raise
        except PyMongoError as e:
            logger.error(f"Failed to {action}: {e}")
            raise StoreError(f"Failed to {action}", detail=str(e)) from e

    def _page_params(self, page: Any, limit: Any) -> tuple[int, int]:
        errors = []
        if limit is None:
            limit = self.default_page_size

        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            errors.append(field_error("page", "page must be an integer greater than or equal to 1"))
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            errors.append(field_error("limit", "limit must be an integer greater than or equal to 1"))
        if errors:
            raise ValidationError(errors, message="Invalid pagination parameters")

        limit = min(limit, self.max_page_size)
        if (page - 1) * limit > MAX_INT64:
            raise ValidationError(
                [field_error("page", f"page must be at most {MAX_INT64 // limit + 1}")],
                message="Invalid pagination parameters",
            )
        return page, limit

    async def list_products(
        self,
        page: int = 1,
        limit: Optional[int] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        List one page of products matching the category and search filters.

        Results are ordered by ``id`` so consecutive pages never overlap.
        """
        page, limit = self._page_params(page, limit)
        filter_query = build_filter(category, search)
        skip = (page - 1) * limit

        total = await self._run(self.collection.count_documents(filter_query), "count products")
        cursor = self.collection.find(filter_query).sort("id", ASCENDING).skip(skip).limit(limit)
        products = await self._run(cursor.to_list(length=limit), "fetch products")

        data = format_products(products)
        return {
            "count": len(data),
            "total": total,
            "page": page,
            "pages": math.ceil(total / limit),
            "data": data,
        }

    async def _find(self, product_id: int) -> Dict[str, Any]:
        product = await self._run(
            self.collection.find_one({"id": product_id}), f"fetch product {product_id}"
        )
        if product is None:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    async def get_product(self, product_id: int) -> Dict[str, Any]:
        return format_product(await self._find(product_id))

    async def create_product(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Validate and insert a new product.

        The unique index on ``id`` is the final guard: a duplicate-key error
        from a concurrent insert is reported like the pre-check.
        """
        product = normalize_on_create(data)
        product_id = product["id"]

        existing = await self._run(
            self.collection.find_one({"id": product_id}), f"fetch product {product_id}"
        )
        if existing is not None:
            raise ConflictError(f"Product with id {product_id} already exists")

        now = datetime.now(timezone.utc)
        document = {**product, "createdAt": now, "updatedAt": now}
        try:
            await self._run(self.collection.insert_one(document), f"create product {product_id}")
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate id rejected by unique index: {product_id}")
            raise ConflictError(f"Product with id {product_id} already exists") from e

        logger.info(f"Product created: {product['name']} (ID: {product_id})")
        return format_product(document)

    async def update_product(self, product_id: int, patch: Mapping[str, Any]) -> Dict[str, Any]:
        """Apply a partial update and return the stored result."""
        existing = await self._find(product_id)
        product = normalize_on_update(existing, patch)

        update_doc: Dict[str, Any] = {"$set": {**product, "updatedAt": datetime.now(timezone.utc)}}
        if LEGACY_IMAGE_FIELD in existing:
            update_doc["$unset"] = {LEGACY_IMAGE_FIELD: ""}

        result = await self._run(
            self.collection.update_one({"id": product_id}, update_doc),
            f"update product {product_id}",
        )
        if result.matched_count == 0:
            raise NotFoundError(f"Product {product_id} not found")

        logger.info(f"Product updated: {product_id}")
        return format_product(await self._find(product_id))

    async def delete_product(self, product_id: int) -> Dict[str, bool]:
        result = await self._run(
            self.collection.delete_one({"id": product_id}), f"delete product {product_id}"
        )
        if result.deleted_count == 0:
            raise NotFoundError(f"Product {product_id} not found")

        logger.info(f"Product deleted: {product_id}")
        return {"success": True}
