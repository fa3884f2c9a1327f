"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient

from api.prices import get_price_service
from main import app
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    clock,
    mock_provider,
    price_service,
    quote_cache,
)


@pytest.fixture(name="client")
def client_fixture(price_service):
    """Create a test client whose PriceService uses the mock provider."""

    def override_get_price_service():
        return price_service

    app.dependency_overrides[get_price_service] = override_get_price_service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
