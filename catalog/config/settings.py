"""
Application configuration settings.
Handles environment variables and application-wide settings.
"""
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application settings
    app_name: str = Field(default="Product Catalog API")
    app_version: str = Field(default="1.0.0")
    app_description: str = Field(
        default="A FastAPI-based product catalog backed by MongoDB"
    )
    environment: str = Field(default="development", description="development or production")
    debug: bool = Field(default=False)

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)
    reload: bool = Field(default=False)

    # Database settings
    mongodb_url: str = Field(default="mongodb://localhost:27017")
    database_name: str = Field(default="catalog_db")
    collection_name: str = Field(default="products")

    # MongoDB connection settings
    server_selection_timeout_ms: int = Field(
        default=30000, validation_alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS"
    )
    connect_timeout_ms: int = Field(default=30000, validation_alias="MONGODB_CONNECT_TIMEOUT_MS")
    socket_timeout_ms: int = Field(default=30000, validation_alias="MONGODB_SOCKET_TIMEOUT_MS")
    max_pool_size: int = Field(default=10, validation_alias="MONGODB_MAX_POOL_SIZE")
    min_pool_size: int = Field(default=1, validation_alias="MONGODB_MIN_POOL_SIZE")
    retry_writes: bool = Field(default=True, validation_alias="MONGODB_RETRY_WRITES")
    direct_connection: bool = Field(default=False, validation_alias="MONGODB_DIRECT_CONNECTION")

    # Logging settings
    log_level: str = Field(default="INFO")

    # API settings
    api_prefix: str = Field(default="", description="Mount point for the product routes, e.g. /api")
    cors_origins: str = Field(default="*", description="Comma-separated allowed origins")

    # Pagination defaults
    default_page_size: int = Field(default=250, ge=1)
    max_page_size: int = Field(default=250, ge=1)

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
