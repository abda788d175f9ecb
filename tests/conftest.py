"""Shared fixtures: every test gets its own data directory."""

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import JsonDatabase
from main import create_app
from schemas.product import ProductCreate


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / "data" / "products.json"


@pytest.fixture
def db(data_path):
    """Store without sample data."""
    return JsonDatabase(data_path)


@pytest.fixture
def settings(tmp_path):
    return Settings(DATA_DIR=tmp_path / "data", SEED_FILE=None, API_PREFIX="", _env_file=None)


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c


@pytest.fixture
def make_product():
    def _make(**overrides):
        fields = {
            "name": "Mouse",
            "category": "Electronics",
            "price": 9.99,
            "stock": 5,
            "rating": 4.2,
        }
        fields.update(overrides)
        return ProductCreate(**fields)

    return _make
