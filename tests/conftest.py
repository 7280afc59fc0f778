# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from bolucompras.config import Settings
from bolucompras.main import create_app
from bolusdk import PageController, ShoppingListClient


@pytest.fixture
def app():
    settings = Settings(database_url="sqlite://", enable_reset=True, page_size=10, log_level="WARNING")
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def sdk(client):
    return ShoppingListClient(base_url="http://testserver", session=client)


@pytest.fixture
def notes():
    return []


@pytest.fixture
def controller(sdk, notes):
    return PageController(sdk, page_size=3, notify=lambda message, is_error: notes.append((message, is_error)))


@pytest.fixture
def add(client):
    def _add(name, **fields):
        r = client.post("/api/products", json={"name": name, **fields})
        assert r.status_code == 201, r.text
        return r.json()
    return _add
