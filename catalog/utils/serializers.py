"""
MongoDB document serialization utilities
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..models.product import LEGACY_IMAGE_FIELD

# Storage-only keys that never leave the service
INTERNAL_FIELDS = ("_id", "__v")


def format_product(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Convert a stored product document into its wire representation

    Args:
        doc: MongoDB document dictionary

    Returns:
        Copy of the document without internal fields, with ``images`` always
        a list and timestamps as ISO-8601 strings, or None if input is None
    """
    if doc is None:
        return None

    # Create a copy to avoid modifying the original document
    product = {key: value for key, value in doc.items() if key not in INTERNAL_FIELDS}

    legacy_images = product.pop(LEGACY_IMAGE_FIELD, None)
    images = product.get("images", legacy_images)
    if images is None:
        images = []
    elif isinstance(images, str):
        images = [images]
    product["images"] = list(images)

    for key in ("createdAt", "updatedAt"):
        if isinstance(product.get(key), datetime):
            product[key] = product[key].isoformat()

    return product


def format_products(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Format a list of MongoDB documents

    Args:
        docs: List of MongoDB document dictionaries

    Returns:
        List of formatted products
    """
    return [format_product(doc) for doc in docs if doc is not None]
