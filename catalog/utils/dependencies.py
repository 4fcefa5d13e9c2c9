"""
FastAPI dependencies for database access and the product service
"""
from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorCollection

from ..config.database import DatabaseManager, get_database_manager
from ..config.settings import Settings, get_settings
from ..services.product_service import ProductService
from .exceptions import DatabaseUnavailableError


def get_db_manager(request: Request) -> DatabaseManager:
    """Database manager stored on the app by the lifespan, or the global one."""
    return getattr(request.app.state, "db_manager", None) or get_database_manager()


async def get_products_collection(
    manager: DatabaseManager = Depends(get_db_manager),
) -> AsyncIOMotorCollection:
    """
    Dependency to get the products collection

    Raises:
        DatabaseUnavailableError: If database connection is not available
    """
    if not manager.is_connected():
        raise DatabaseUnavailableError()
    return manager.get_collection()


async def get_product_service(
    collection: AsyncIOMotorCollection = Depends(get_products_collection),
    settings: Settings = Depends(get_settings),
) -> ProductService:
    return ProductService(
        collection,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )
