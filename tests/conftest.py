"""Shared test fixtures for the Retail POS API."""

import pytest

from retail_pos.config import TestingConfig
from retail_pos.main import create_app
from retail_pos.models import db


@pytest.fixture
def app():
    """Provide an app bound to a fresh in-memory SQLite database."""
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def sample_prices() -> list:
    """Price payloads as the POS form submits them."""
    return [
        {'productName': 'Jasmine Rice 5kg', 'price': 165, 'date': '2024-01-01'},
        {'productName': 'Jasmine Rice 5kg', 'price': 175, 'date': '2024-01-01'},
        {'productName': 'Cooking Oil 1L', 'price': '52.50', 'date': '2024-01-15'},
        {'productName': 'Jasmine Rice 5kg', 'price': 170, 'date': '2024-02-03'},
    ]


@pytest.fixture
def seeded_client(client, sample_prices):
    response = client.post('/api/prices', json=sample_prices)
    assert response.status_code == 201
    return client
