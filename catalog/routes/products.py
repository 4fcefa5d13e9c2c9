"""
Product routes: list, fetch, create, update and delete.
"""
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from ..models.product import MAX_INT64
from ..schemas.common import ErrorResponse, SuccessResponse
from ..schemas.product import PRODUCT_EXAMPLE, ProductResponse, ProductsListResponse
from ..services.product_service import ProductService
from ..utils.dependencies import get_product_service

ProductId = Annotated[int, Path(ge=1, le=MAX_INT64, description="Caller-supplied product ID")]

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)


@router.get("", status_code=200, response_model=ProductsListResponse)
async def list_products(
    page: int = Query(1, description="Page number, starting at 1"),
    limit: Optional[int] = Query(None, description="Products per page (capped at the configured maximum)"),
    category: Optional[str] = Query(None, description="Exact category, or 'all'"),
    search: Optional[str] = Query(None, description="Case-insensitive text matched against name and description"),
    service: ProductService = Depends(get_product_service),
):
    """List products with optional filtering and pagination"""
    result = await service.list_products(page=page, limit=limit, category=category, search=search)
    return {"success": True, **result}


@router.get("/{product_id}", status_code=200, response_model=ProductResponse,
            responses={404: {"model": ErrorResponse}})
async def get_product(product_id: ProductId, service: ProductService = Depends(get_product_service)):
    """Get a specific product by ID"""
    return {"success": True, "data": await service.get_product(product_id)}


@router.post("", status_code=201, response_model=ProductResponse,
             responses={409: {"model": ErrorResponse}})
async def create_product(
    payload: Dict[str, Any] = Body(..., examples=[PRODUCT_EXAMPLE]),
    service: ProductService = Depends(get_product_service),
):
    """Create a new product"""
    return {"success": True, "data": await service.create_product(payload)}


@router.put("/{product_id}", status_code=200, response_model=ProductResponse,
            responses={404: {"model": ErrorResponse}})
async def update_product(
    product_id: ProductId,
    payload: Dict[str, Any] = Body(..., examples=[{"price": 12.5, "inStock": False}]),
    service: ProductService = Depends(get_product_service),
):
    """Update a product; only the supplied fields change"""
    return {"success": True, "data": await service.update_product(product_id, payload)}


@router.delete("/{product_id}", status_code=200, response_model=SuccessResponse,
               responses={404: {"model": ErrorResponse}})
async def delete_product(product_id: ProductId, service: ProductService = Depends(get_product_service)):
    """Delete a product"""
    return await service.delete_product(product_id)
