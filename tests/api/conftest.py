"""Fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from sourcewise.api.main import create_app


@pytest.fixture
def client(engine):
    """Create a test client serving the fixture engine."""
    with TestClient(create_app(engine)) as client:
        yield client


@pytest.fixture
def match_request(requirement_record, perfect_supplier):
    """Match request with an explicit catalog."""
    return {
        "requirement": requirement_record,
        "suppliers": [perfect_supplier.model_dump(mode="json")],
        "as_of": "2026-01-01",
    }


@pytest.fixture
def analyze_request():
    return {
        "rfq": {
            "id": "CRFQ-API",
            "products": [
                {"name": "HR steel coils", "quantity": 200, "budget": 900_000},
                {"name": "Steel fasteners", "quantity": 5_000, "budget": 250_000},
            ],
            "suppliers": ["SUP-100", "SUP-200"],
            "priority": "urgent",
        }
    }
