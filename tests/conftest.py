import pytest
from fastapi.testclient import TestClient

from catalog.config.settings import Settings
from catalog.main import create_app
from catalog.services.product_service import ProductService
from catalog.utils.dependencies import get_products_collection
from tests.fakes import FakeCollection


@pytest.fixture
def collection():
    return FakeCollection()


@pytest.fixture
def service(collection):
    return ProductService(collection)


@pytest.fixture
def settings():
    return Settings(environment="development", api_prefix="")


@pytest.fixture
def app(settings, collection):
    application = create_app(settings)
    application.dependency_overrides[get_products_collection] = lambda: collection
    return application


@pytest.fixture
def client(app):
    return TestClient(app)
