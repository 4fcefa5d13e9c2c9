"""
Database configuration and connection management.
Handles MongoDB connection lifecycle and database operations.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages MongoDB database connection and operations."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    async def connect(self) -> None:
        """Establish connection to MongoDB."""
        settings = self.settings
        try:
            logger.info("🚀 Connecting to MongoDB...")

            self.client = AsyncIOMotorClient(
                settings.mongodb_url,
                serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
                connectTimeoutMS=settings.connect_timeout_ms,
                socketTimeoutMS=settings.socket_timeout_ms,
                maxPoolSize=settings.max_pool_size,
                minPoolSize=settings.min_pool_size,
                retryWrites=settings.retry_writes,
                directConnection=settings.direct_connection,
            )

            database = self.client[settings.database_name]
            await self.client.admin.command("ping")
            self.database = database
            logger.info("✅ Connected to MongoDB successfully")

        except PyMongoError as db_error:
            # The app still starts; product routes answer 503 until a restart.
            logger.warning(f"⚠️  MongoDB connection failed: {db_error}")

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self.client is not None:
            self.client.close()
            self.client = None
            self.database = None
            logger.info("🔌 MongoDB connection closed")

    async def create_indexes(self) -> None:
        """Create the products indexes. The unique ``id`` index guards duplicate creates."""
        if self.database is None:
            logger.warning("Database not connected, skipping index creation")
            return

        products = self.get_collection()
        try:
            await products.create_index([("id", ASCENDING)], unique=True, name="id_unique")
            await products.create_index("category")
            await products.create_index("name")
            logger.info("✅ Database indexes created successfully")
        except PyMongoError as index_error:
            logger.warning(f"⚠️  Failed to create indexes: {index_error}")

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get database instance."""
        if self.database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.database

    def get_collection(self) -> AsyncIOMotorCollection:
        """Get the products collection."""
        return self.get_database()[self.settings.collection_name]

    def is_connected(self) -> bool:
        """Check if database is connected."""
        return self.database is not None

    async def ping(self) -> bool:
        if self.database is None:
            return False
        try:
            await self.database.command("ping")
            return True
        except PyMongoError:
            return False


# Global database manager instance
db_manager = DatabaseManager()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for database connection."""
    logger.info("🚀 Starting up application...")
    await db_manager.connect()
    await db_manager.create_indexes()

    # Store database manager in app state for dependency injection
    app.state.db_manager = db_manager

    yield

    await db_manager.disconnect()


def get_database_manager() -> DatabaseManager:
    """Get database manager instance."""
    return db_manager
