"""
Error taxonomy for the catalog.

Every error carries the HTTP status it maps to, so the transport layer can
translate it without inspecting the type.
"""
from typing import Any, Dict, List, Optional


class CatalogError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, Any]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationError(CatalogError):
    """One or more fields are missing or malformed."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, Any]], message: Optional[str] = None):
        if message is None:
            fields = ", ".join(error["field"] for error in errors)
            message = f"Validation failed: {fields}" if fields else self.default_message
        super().__init__(message, errors)


class NotFoundError(CatalogError):
    status_code = 404
    default_message = "Product not found"


class ConflictError(CatalogError):
    status_code = 409
    default_message = "Product with this id already exists"


class StoreError(CatalogError):
    """The document store failed. ``detail`` holds the driver's message."""

    status_code = 500
    default_message = "Database operation failed"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.detail = detail


class DatabaseUnavailableError(CatalogError):
    status_code = 503
    default_message = "Database connection not available. Please check your MongoDB connection."


def field_error(field: str, message: str) -> Dict[str, str]:
    return {"field": field, "message": message}
