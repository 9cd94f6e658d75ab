"""Pytest configuration and shared fixtures."""

from datetime import date, datetime, timedelta

import pytest

from sourcewise.data.factory import Collaborators
from sourcewise.data.interfaces import RFQResponseRecord, SupplierHistory
from sourcewise.data.sources.mock import (
    InMemoryRFQStore,
    InMemorySupplierDirectory,
    MockMarketDataService,
)
from sourcewise.engine import SourcingEngine
from sourcewise.infrastructure.fallback import CollaboratorGuard
from sourcewise.models import (
    ComplexRFQ,
    LineItem,
    NegotiationPolicy,
    PriceRange,
    Priority,
    RFQRequirement,
    ScoringPolicy,
    Supplier,
    VerificationLevel,
)

AS_OF = date(2026, 1, 1)
NOW = datetime(2026, 1, 1, 12, 0, 0)


@pytest.fixture
def as_of():
    """Fixed reference date for lead-time scoring."""
    return AS_OF


@pytest.fixture
def now():
    """Fixed reference time for response-time measurements."""
    return NOW


@pytest.fixture
def scoring_policy():
    return ScoringPolicy()


@pytest.fixture
def negotiation_policy():
    return NegotiationPolicy()


@pytest.fixture
def requirement():
    """A steel requirement delivered to Pune, 30 days after AS_OF."""
    return RFQRequirement(
        id="RFQ-1",
        title="Structural steel beams",
        category="Steel",
        quantity="120 tonnes",
        target_price="₹12,00,000",
        deadline=AS_OF + timedelta(days=30),
        location={"city": "Pune", "state": "Maharashtra", "country": "India"},
    )


@pytest.fixture
def requirement_record():
    """The same requirement as a raw mapping."""
    return {
        "id": "RFQ-1",
        "title": "Structural steel beams",
        "category": "Steel",
        "quantity": "120 tonnes",
        "target_price": "12 lakh",
        "deadline": (AS_OF + timedelta(days=30)).isoformat(),
        "location": "Pune, Maharashtra, India",
    }


def make_supplier(**overrides) -> Supplier:
    """Build a supplier that fits ``requirement`` perfectly unless overridden."""
    fields = {
        "id": "SUP-100",
        "name": "Deccan Steel Corporation",
        "categories": ["Steel"],
        "rating": 5.0,
        "location": {"city": "Pune", "state": "Maharashtra", "country": "India"},
        "price_range": PriceRange(min=100_000, max=2_000_000),
        "compliance_score": 100,
        "on_time_delivery_rate": 100,
        "quality_rating": 5.0,
        "financial_rating": 4.8,
        "verification_level": VerificationLevel.PREMIUM,
        "years_of_experience": 25,
        "capacity": 500_000,
        "lead_time_days": 10,
    }
    fields.update(overrides)
    return Supplier(**fields)


@pytest.fixture
def perfect_supplier():
    return make_supplier()


@pytest.fixture
def supplier_factory():
    return make_supplier


@pytest.fixture
def complex_rfq():
    """Two-line RFQ under the bulk-discount threshold."""
    return ComplexRFQ(
        id="CRFQ-1",
        products=[
            LineItem(name="HR steel coils", quantity=200, specifications={"grade": "E250"},
                     budget=600_000),
            LineItem(name="Steel fasteners", quantity=50_000, budget=150_000),
        ],
        suppliers=["SUP-100", "SUP-200"],
        timeline="2026-02-15",
        priority=Priority.HIGH,
    )


@pytest.fixture
def supplier_history(now):
    """Ten closed responses of six hours each, with transactions."""
    return SupplierHistory(
        supplier_id="SUP-100",
        responses=[
            RFQResponseRecord(
                rfq_id=f"RFQ-H{i}",
                created_at=now - timedelta(days=10 + i),
                responded_at=now - timedelta(days=10 + i) + timedelta(hours=6),
            )
            for i in range(10)
        ],
        transaction_count=12,
        verified=True,
    )


@pytest.fixture
def collaborators(perfect_supplier, supplier_history, complex_rfq, requirement):
    """In-memory collaborators holding the fixture entities."""
    weak = make_supplier(
        id="SUP-200",
        name="Konkan Metal Traders",
        rating=2.0,
        verification_level=VerificationLevel.BASIC,
    )
    return Collaborators(
        directory=InMemorySupplierDirectory(
            suppliers=[perfect_supplier, weak],
            histories={"SUP-100": supplier_history},
        ),
        market_data=MockMarketDataService(),
        rfq_store=InMemoryRFQStore(requirements=[requirement], complex_rfqs=[complex_rfq]),
    )


@pytest.fixture
def engine(collaborators):
    return SourcingEngine(collaborators, guard=CollaboratorGuard(timeout_seconds=1.0))
