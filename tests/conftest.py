"""
Shared fixtures.

The settings are cached on first import, so the environment is pointed at an
in-memory SQLite database before anything from storefront is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from storefront.database import engine
from storefront.main import app
from storefront.models.product import Product

SESSION_HEADER = "X-Cart-Session"


@pytest.fixture(autouse=True)
def database():
    """
    Fresh schema for every test.
    """
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def test_client():
    """
    TestClient without lifespan: tables come from the `database` fixture.
    """
    return TestClient(app)


@pytest.fixture
def cart_client():
    """
    Factory for clients bound to a specific cart session.
    """
    def _make(session_id: str) -> TestClient:
        return TestClient(app, headers={SESSION_HEADER: session_id})

    return _make


@pytest.fixture
def make_product():
    """
    Insert a product and return its id.
    """
    def _make(**overrides) -> str:
        data = {
            "name": "Test Product",
            "description": "A product used in tests",
            "price": 10.0,
            "category": "Other",
            "image_url": "https://example.com/product.png",
            "stock": 10,
        }
        data.update(overrides)
        with Session(engine) as s:
            product = Product(**data)
            s.add(product)
            s.commit()
            return product.id

    return _make
