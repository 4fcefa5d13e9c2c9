"""
Normalization rules for product documents.

``normalize_on_create`` and ``normalize_on_update`` are the only two ways a
product reaches the store. Both return a new dict in the stored shape, or
raise ``ValidationError`` listing every offending field at once.
"""
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional

from ..models.product import (
    DESCRIPTION_MAX_LENGTH,
    IMAGE_URL_PATTERN,
    LEGACY_IMAGE_FIELD,
    MAX_INT64,
    MAX_PRICE,
    NAME_MAX_LENGTH,
    WRITABLE_FIELDS,
)
from ..utils.exceptions import ValidationError, field_error

_MISSING = object()
_CENTS = Decimal("0.01")

FieldErrors = List[Dict[str, str]]


def round_money(value: float) -> float:
    """Round half-up to two decimal places (12.345 -> 12.35)."""
    return float(Decimal(str(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _to_number(value: Any) -> Optional[float]:
    """Coerce a JSON number or a numeric string to float, None when not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _is_blank(value: Any) -> bool:
    return value is _MISSING or value is None


def _normalize_id(value: Any, errors: FieldErrors) -> Optional[int]:
    if _is_blank(value):
        errors.append(field_error("id", "id is required"))
        return None
    if isinstance(value, str) and value.strip().isdecimal():
        digits = value.strip()
        # Digit strings longer than an int64 are out of range.
        value = int(digits) if len(digits) <= len(str(MAX_INT64)) else MAX_INT64 + 1
    elif isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(field_error("id", "id must be an integer"))
        return None
    if value < 1:
        errors.append(field_error("id", "id must be a positive integer"))
        return None
    if value > MAX_INT64:
        errors.append(field_error("id", f"id must be at most {MAX_INT64}"))
        return None
    return value


def _normalize_text(
    field: str, value: Any, errors: FieldErrors, max_length: Optional[int] = None
) -> Optional[str]:
    if _is_blank(value):
        errors.append(field_error(field, f"{field} is required"))
        return None
    if not isinstance(value, str):
        errors.append(field_error(field, f"{field} must be a string"))
        return None
    value = value.strip()
    if not value:
        errors.append(field_error(field, f"{field} must not be empty"))
        return None
    if max_length is not None and len(value) > max_length:
        errors.append(field_error(field, f"{field} must be at most {max_length} characters"))
        return None
    return value


def _normalize_description(value: Any, errors: FieldErrors) -> Optional[str]:
    if _is_blank(value):
        return ""
    if not isinstance(value, str):
        errors.append(field_error("description", "description must be a string"))
        return None
    if len(value) > DESCRIPTION_MAX_LENGTH:
        errors.append(
            field_error(
                "description", f"description must be at most {DESCRIPTION_MAX_LENGTH} characters"
            )
        )
        return None
    return value


def _check_money(field: str, number: float, errors: FieldErrors) -> Optional[float]:
    if number < 0:
        errors.append(field_error(field, f"{field} must not be negative"))
        return None
    if math.isinf(number):
        errors.append(field_error(field, f"{field} must be a finite number"))
        return None
    if number > MAX_PRICE:
        errors.append(field_error(field, f"{field} must be at most {MAX_PRICE}"))
        return None
    return round_money(number)


def _normalize_price(value: Any, errors: FieldErrors) -> Optional[float]:
    if _is_blank(value):
        errors.append(field_error("price", "price is required"))
        return None
    number = _to_number(value)
    if number is None or math.isnan(number):
        errors.append(field_error("price", "price must be a number"))
        return None
    return _check_money("price", number, errors)


def _normalize_bulk_price(value: Any, price: Optional[float], errors: FieldErrors) -> Optional[float]:
    number = None if _is_blank(value) else _to_number(value)
    if number is None or math.isnan(number):
        return price
    return _check_money("bulkPrice", number, errors)


def _normalize_bulk_qty(value: Any, errors: FieldErrors) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        quantity = value
    else:
        number = None if _is_blank(value) else _to_number(value)
        if number is None or math.isnan(number):
            return 1
        if not number.is_integer():
            errors.append(field_error("bulkQty", "bulkQty must be a whole number"))
            return None
        quantity = int(number)
    if quantity < 1:
        errors.append(field_error("bulkQty", "bulkQty must be at least 1"))
        return None
    if quantity > MAX_INT64:
        errors.append(field_error("bulkQty", f"bulkQty must be at most {MAX_INT64}"))
        return None
    return quantity


def _normalize_in_stock(value: Any, errors: FieldErrors) -> Optional[bool]:
    if _is_blank(value):
        return True
    if not isinstance(value, bool):
        errors.append(field_error("inStock", "inStock must be a boolean"))
        return None
    return value


def _normalize_images(value: Any, errors: FieldErrors) -> Optional[List[str]]:
    if _is_blank(value):
        errors.append(field_error("images", "images is required"))
        return None
    # Compatibility shim: older clients send a single URL string.
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        errors.append(field_error("images", "images must be a list of URLs"))
        return None
    if not value:
        errors.append(field_error("images", "images must contain at least one URL"))
        return None

    invalid = [
        str(position)
        for position, url in enumerate(value)
        if not isinstance(url, str) or not IMAGE_URL_PATTERN.match(url.strip())
    ]
    if invalid:
        errors.append(
            field_error(
                "images",
                f"images must only contain http(s) URLs (invalid entries at {', '.join(invalid)})",
            )
        )
        return None
    return [url.strip() for url in value]


def _images_value(source: Mapping[str, Any]) -> Any:
    value = source.get("images", _MISSING)
    if _is_blank(value):
        value = source.get(LEGACY_IMAGE_FIELD, value)
    return value


def _normalize(source: Mapping[str, Any], errors: FieldErrors) -> Dict[str, Any]:
    price = _normalize_price(source.get("price", _MISSING), errors)
    record = {
        "id": _normalize_id(source.get("id", _MISSING), errors),
        "name": _normalize_text("name", source.get("name", _MISSING), errors, NAME_MAX_LENGTH),
        "description": _normalize_description(source.get("description", _MISSING), errors),
        "price": price,
        "bulkPrice": _normalize_bulk_price(source.get("bulkPrice", _MISSING), price, errors),
        "bulkQty": _normalize_bulk_qty(source.get("bulkQty", _MISSING), errors),
        "category": _normalize_text("category", source.get("category", _MISSING), errors),
        "inStock": _normalize_in_stock(source.get("inStock", _MISSING), errors),
        "images": _normalize_images(_images_value(source), errors),
    }
    return record


def _require_mapping(data: Any) -> None:
    if not isinstance(data, Mapping):
        raise ValidationError([field_error("body", "Request body must be a JSON object")])


def normalize_on_create(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate and normalize a new product.

    Unknown keys and store-managed keys (``_id``, ``createdAt``...) are dropped.

    Raises:
        ValidationError: with one entry per violated field
    """
    _require_mapping(data)
    errors: FieldErrors = []
    record = _normalize(data, errors)
    if errors:
        raise ValidationError(errors)
    return record


def normalize_on_update(existing: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Apply ``patch`` on top of ``existing`` and re-validate the merged record.

    Only fields present in ``patch`` change. ``id`` is immutable: a patch
    carrying a different id is rejected, the same id is ignored.

    Raises:
        ValidationError: with one entry per violated field
    """
    _require_mapping(patch)
    errors: FieldErrors = []

    merged = {field: existing[field] for field in WRITABLE_FIELDS if field in existing}
    if _is_blank(merged.get("images")) and LEGACY_IMAGE_FIELD in existing:
        merged["images"] = existing[LEGACY_IMAGE_FIELD]

    if "id" in patch:
        requested_id = _normalize_id(patch["id"], errors)
        if requested_id is not None and requested_id != _normalize_id(existing.get("id"), []):
            errors.append(field_error("id", "id cannot be changed"))

    for field in WRITABLE_FIELDS:
        if field != "id" and field in patch:
            merged[field] = patch[field]
    if "images" not in patch and LEGACY_IMAGE_FIELD in patch:
        merged["images"] = patch[LEGACY_IMAGE_FIELD]

    record = _normalize(merged, errors)
    if errors:
        raise ValidationError(errors)
    return record
